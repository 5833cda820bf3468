"""User repository: the credential store behind the session lifecycle."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from auth_api.core.security import burn_password_check, hash_password
from auth_api.core.security import verify_password as _check_password
from auth_api.models.user import User
from auth_api.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    """Return the canonical (trimmed, lowercased) form of ``email``."""
    return email.strip().lower()


def coerce_user_id(user_id: UUID | str) -> UUID | None:
    """Parse an identity id, returning ``None`` for malformed values."""
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except (TypeError, ValueError):
        return None


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It looks up, builds and stores identities and owns password hashing at
    write time. It NEVER issues tokens or decides session policy.
    """

    model = User

    def _updatable_fields(self) -> set[str]:
        """Columns that may change through :meth:`update_partial`."""
        return {"refresh_token", "last_login_at", "is_email_verified"}

    # ---------------------------- Lookups ----------------------------

    def find_by_email(self, email: str) -> User | None:
        """Fetch a live user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        return self.find_one(email=normalize_email(email))

    def find_by_id(self, user_id: UUID | str) -> User | None:
        """Fetch a live user by id; malformed ids are treated as absent.

        :param user_id: UUID or its string form (e.g. a token subject).
        :type user_id: UUID | str
        :returns: User instance or ``None``.
        :rtype: User | None
        """
        parsed = coerce_user_id(user_id)
        if parsed is None:
            return None
        return self.get(parsed)

    def exists_by_email(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    # ---------------------------- Writes ----------------------------

    def create(self, **fields: Any) -> User:
        """Build an unsaved :class:`User` with a fresh id and normalized email.

        Plaintext passwords are not accepted here; pass them to :meth:`save`.
        """
        if "password" in fields or "password_hash" in fields:
            raise ValueError("Pass plaintext passwords to save(), not create().")
        email = fields.pop("email")
        return User(id=uuid4(), email=normalize_email(email), **fields)

    def save(self, user: User, *, password: str | None = None) -> User:
        """Persist ``user``; hash ``password`` first when one is supplied.

        An empty or missing password leaves ``password_hash`` untouched, so an
        existing hash is never hashed again.

        :param user: Entity to persist (new or already tracked).
        :param password: Optional plaintext password to hash before writing.
        :returns: The persisted entity after flush.
        """
        if password:
            user.password_hash = hash_password(password)
        return self.add(user)

    def update_partial(self, user_id: UUID | str, **fields: Any) -> int:
        """Update the named columns of one user without loading or re-hashing it.

        :returns: Affected row count (``0`` for unknown or malformed ids).
        """
        parsed = coerce_user_id(user_id)
        if parsed is None:
            return 0
        return self.update_fields(parsed, fields)

    # ---------------------------- Password ops ----------------------------

    def verify_password(self, user: User | None, candidate: str) -> bool:
        """Check ``candidate`` against ``user``'s stored hash.

        When ``user`` is ``None`` a dummy verification still runs so callers
        spend the same time for unknown emails, and ``False`` is returned.
        """
        if user is None:
            burn_password_check(candidate)
            return False
        return _check_password(candidate, user.password_hash)
