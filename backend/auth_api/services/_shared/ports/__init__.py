"""
auth_api.services._shared.ports
===============================

*Ports* (hexagonal interfaces) the service layer depends on.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, :class:`~.SessionToken`, :class:`~.TokenKind`
    and :class:`~.TokenVerificationError`.
- :mod:`credential_store`:
    Defines :class:`~.CredentialStore`, the persistence contract for identities.

Concrete adapters live under ``auth_api.infra`` and ``auth_api.repositories``.
"""

from __future__ import annotations

from .credential_store import CredentialStore
from .token_codec import SessionToken, TokenCodec, TokenKind, TokenVerificationError

__all__ = [
    "CredentialStore",
    "SessionToken",
    "TokenCodec",
    "TokenKind",
    "TokenVerificationError",
]
