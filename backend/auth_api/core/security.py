"""Password hashing helpers built on Werkzeug's salted hashes."""

from __future__ import annotations

from functools import lru_cache

from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(raw: str) -> str:
    """
    Return a salted, irreversible hash of ``raw``.

    :param raw: Plain text password.
    :type raw: str
    :returns: Encoded hash including method and salt.
    :rtype: str
    :raises ValueError: If ``raw`` is empty or not a string.
    """
    if not isinstance(raw, str) or not raw:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(raw)


def verify_password(candidate: str, password_hash: str | None) -> bool:
    """
    Compare ``candidate`` against ``password_hash`` using the hash's own check.

    :param candidate: Plain text password candidate.
    :param password_hash: Stored hash (``None``/empty never matches).
    :returns: ``True`` if it matches; otherwise ``False``.
    """
    if not password_hash or not isinstance(candidate, str):
        return False
    return bool(check_password_hash(password_hash, candidate))


@lru_cache(maxsize=1)
def dummy_hash() -> str:
    """Hash used to equalize timing when the login email is unknown."""
    return generate_password_hash("timing-equalization-dummy")


def burn_password_check(candidate: str) -> None:
    """Spend one hash verification so unknown emails cost the same as known ones."""
    verify_password(candidate, dummy_hash())
