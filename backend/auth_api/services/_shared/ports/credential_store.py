from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from auth_api.models.user import User


class CredentialStore(Protocol):
    """
    Persistence contract for identity records.

    Implementations flush but never commit; the unit of work owns the
    transaction.
    """

    def find_by_email(self, email: str) -> User | None: ...

    def find_by_id(self, user_id: UUID | str) -> User | None: ...

    def exists_by_email(self, email: str) -> bool: ...

    def create(self, **fields: Any) -> User:
        """Build an unsaved identity with a fresh id."""
        ...

    def save(self, user: User, *, password: str | None = None) -> User:
        """Persist ``user``, hashing ``password`` first when one is supplied."""
        ...

    def update_partial(self, user_id: UUID | str, **fields: Any) -> int:
        """Update only the named columns; returns the affected row count."""
        ...

    def verify_password(self, user: User | None, candidate: str) -> bool: ...
