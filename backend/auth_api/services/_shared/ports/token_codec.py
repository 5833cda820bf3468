from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class TokenKind(str, Enum):
    """Purpose discriminator embedded in every session token."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenVerificationError(Exception):
    """
    Raised by :meth:`TokenCodec.verify` for any invalid token.

    Bad signatures, malformed payloads and expired tokens all surface as this
    one error; ``expired`` is kept for logging only.
    """

    def __init__(self, message: str = "Token verification failed", *, expired: bool = False):
        super().__init__(message)
        self.expired = expired


@dataclass(frozen=True, slots=True)
class SessionToken:
    """
    Decoded session token payload.

    :ivar subject_id: Identity id (string form).
    :ivar subject_email: Identity email at issuance time.
    :ivar kind: ``access`` or ``refresh``.
    :ivar expires_at: Absolute expiry (UTC) when present.
    :ivar jti: Unique token identifier when present.
    :ivar claims: Raw claim mapping.
    """

    subject_id: str
    subject_email: str
    kind: TokenKind
    expires_at: datetime | None = None
    jti: str | None = None
    claims: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


class TokenCodec(Protocol):
    """Port for issuing and verifying signed, time-bounded session tokens."""

    def issue(self, subject_id: str, subject_email: str, kind: TokenKind) -> str:
        """Sign a token whose lifetime is derived from ``kind``."""
        ...

    def verify(self, token: str) -> SessionToken:
        """Check signature and expiry. :raises TokenVerificationError: on any failure."""
        ...

    def decode_unsafe(self, token: str) -> SessionToken | None:
        """Parse the payload without checking signature or expiry (inspection only)."""
        ...
