# auth_api/services/auth/gate.py
from __future__ import annotations

import logging

from auth_api.services._shared.base import BaseService, UowFactory
from auth_api.services._shared.errors import AuthError, ErrorKind
from auth_api.services._shared.ports import TokenCodec, TokenKind, TokenVerificationError
from auth_api.services.auth.dto import AuthContext, UserPublicOut

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


class AuthenticationGate(BaseService):
    """
    Request-time authentication check over bearer access tokens.

    ``resolve`` is the required mode: every failure is an ``UNAUTHORIZED``
    :class:`AuthError`. ``resolve_optional`` swallows those and returns
    ``None`` so anonymous callers continue; storage outages still propagate.
    """

    def __init__(self, *, codec: TokenCodec, ro_uow_factory: UowFactory | None = None) -> None:
        super().__init__(ro_uow_factory=ro_uow_factory)
        self.codec = codec

    @staticmethod
    def extract_bearer(header: str | None) -> str | None:
        """
        Return the token of a ``Bearer <token>`` header, or ``None``.

        Runs of whitespace between scheme and token are tolerated; a bare
        ``Bearer`` or any extra segment makes the header unusable.
        """
        if not header:
            return None
        parts = header.split()
        if len(parts) != 2 or parts[0] != BEARER_SCHEME:
            return None
        return parts[1]

    def resolve(self, header: str | None) -> AuthContext:
        """
        Authenticate a request from its ``Authorization`` header.

        :param header: Raw header value (may be ``None``).
        :returns: The resolved identity, raw token and verified payload.
        :raises AuthError: ``UNAUTHORIZED``, or ``PERSISTENCE_FAILURE`` on storage errors.
        """
        token = self.extract_bearer(header)
        if token is None:
            raise AuthError(ErrorKind.UNAUTHORIZED, "No token provided")

        try:
            payload = self.codec.verify(token)
        except TokenVerificationError as exc:
            raise AuthError(ErrorKind.UNAUTHORIZED, "Invalid token") from exc

        if payload.kind is not TokenKind.ACCESS:
            raise AuthError(ErrorKind.UNAUTHORIZED, "Invalid token type")

        with self.persistence_guard("authenticate"):
            with self.ro_uow() as uow:
                user = uow.users.find_by_id(payload.subject_id)
                public = UserPublicOut.from_model(user) if user is not None else None

        if public is None:
            raise AuthError(ErrorKind.UNAUTHORIZED, "User not found")
        return AuthContext(user=public, token=token, payload=payload)

    def resolve_optional(self, header: str | None) -> AuthContext | None:
        try:
            return self.resolve(header)
        except AuthError as exc:
            if exc.kind is not ErrorKind.UNAUTHORIZED:
                raise
            logger.debug("Optional authentication skipped: %s", exc.message)
            return None
