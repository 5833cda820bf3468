"""
Domain-level errors used within the service layer.

These errors are **framework-agnostic** and never import Flask or HTTP helpers.
Every expected failure of the session lifecycle is one :class:`AuthError`
tagged with an :class:`ErrorKind`; the HTTP layer (``auth_api/core/errors.py``)
owns the single table that maps kinds to responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str, *, column: str | None = None) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message; SQLite only names
    the column (``UNIQUE constraint failed: users.email``), hence ``column``.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Database constraint name (e.g. ``uq_users_email``).
    :param column: Optional ``table.column`` fallback marker.
    :returns: ``True`` if the IntegrityError matches.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    if constraint_name.lower() in message:
        return True
    return column is not None and column.lower() in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to Problem Details responses.
    """


class ErrorKind(Enum):
    """Failure kinds of the session lifecycle: ``(code, http_status_hint)``."""

    DUPLICATE_EMAIL = ("duplicate_email", 409)
    INVALID_CREDENTIALS = ("invalid_credentials", 401)
    INVALID_REFRESH_TOKEN = ("invalid_refresh_token", 401)
    UNAUTHORIZED = ("unauthorized", 401)
    PERSISTENCE_FAILURE = ("persistence_failure", 503)

    def __init__(self, code: str, http_status_hint: int) -> None:
        self.code = code
        self.http_status_hint = http_status_hint


DEFAULT_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.DUPLICATE_EMAIL: "Email already registered",
    ErrorKind.INVALID_CREDENTIALS: "Invalid credentials",
    ErrorKind.INVALID_REFRESH_TOKEN: "Invalid refresh token",
    ErrorKind.UNAUTHORIZED: "Unauthorized",
    ErrorKind.PERSISTENCE_FAILURE: "Storage temporarily unavailable",
}


@dataclass(slots=True, eq=False)
class AuthError(ServiceError):
    """
    Tagged failure raised by the session service and the authentication gate.

    :param kind: Failure kind (see :class:`ErrorKind`).
    :type kind: ErrorKind
    :param message: Client-safe description; defaults per kind.
    :type message: str
    """

    kind: ErrorKind
    message: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = DEFAULT_MESSAGES[self.kind]

    def __str__(self) -> str:
        return self.message

    @property
    def http_status_hint(self) -> int:
        return self.kind.http_status_hint
