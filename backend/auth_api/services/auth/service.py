# auth_api/services/auth/service.py
from __future__ import annotations

import hmac
import logging

from sqlalchemy.exc import IntegrityError

from auth_api.services._shared.base import BaseService, UowFactory
from auth_api.services._shared.errors import AuthError, ErrorKind, violates
from auth_api.services._shared.ports import (
    TokenCodec,
    TokenKind,
    TokenVerificationError,
)
from auth_api.services.auth.dto import (
    AccessTokenOut,
    AuthResultOut,
    LoginIn,
    RefreshIn,
    RegisterIn,
    UserPublicOut,
)

logger = logging.getLogger(__name__)

EMAIL_UNIQUE_CONSTRAINT = "uq_users_email"


class AuthService(BaseService):
    """
    Session lifecycle service (register / login / refresh / logout).

    Tokens are issued through a pluggable :class:`TokenCodec`; the single
    active refresh token of each user is mirrored on the user row and
    compared verbatim on refresh. Concurrent logins for one user are not
    serialized: whichever write commits last holds the active token.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        uow_factory: UowFactory | None = None,
        ro_uow_factory: UowFactory | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Adapter for issuing/verifying session tokens; it owns
            the access and refresh lifetimes.
        :param uow_factory: Read-write unit-of-work factory.
        :param ro_uow_factory: Read-only unit-of-work factory.
        """
        super().__init__(uow_factory=uow_factory, ro_uow_factory=ro_uow_factory)
        self.codec = codec

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create a user and open its first session.

        The user row and its refresh token are written by two separate
        units of work. A failure between them leaves the user without an
        active refresh token; the client then has to log in again.

        :param dto: Validated registration input.
        :returns: Public user plus an access/refresh token pair.
        :raises AuthError: ``DUPLICATE_EMAIL`` or ``PERSISTENCE_FAILURE``.
        """
        with self.persistence_guard("register"):
            try:
                with self.rw_uow() as uow:
                    users = uow.users
                    if users.exists_by_email(dto.email):
                        raise AuthError(ErrorKind.DUPLICATE_EMAIL)
                    user = users.create(
                        first_name=dto.first_name,
                        last_name=dto.last_name,
                        email=dto.email,
                    )
                    users.save(user, password=dto.password)
                    user_id, email = str(user.id), user.email
            except IntegrityError as exc:
                # Lost a race with a concurrent registration for the same email.
                if violates(exc, EMAIL_UNIQUE_CONSTRAINT, column="users.email"):
                    raise AuthError(ErrorKind.DUPLICATE_EMAIL) from exc
                raise

            access, refresh = self._issue_pair(user_id, email)

            with self.rw_uow() as uow:
                users = uow.users
                stored = users.find_by_id(user_id)
                if stored is None:
                    raise AuthError(
                        ErrorKind.PERSISTENCE_FAILURE, "User disappeared during registration"
                    )
                stored.refresh_token = refresh
                users.save(stored)
                public = UserPublicOut.from_model(stored)

        logger.info("User registered", extra={"user_id": user_id})
        return AuthResultOut(user=public, access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown email and wrong password fail identically.

        :param dto: Login input.
        :returns: Public user plus an access/refresh token pair.
        :raises AuthError: ``INVALID_CREDENTIALS`` or ``PERSISTENCE_FAILURE``.
        """
        with self.persistence_guard("login"):
            with self.rw_uow() as uow:
                users = uow.users
                user = users.find_by_email(dto.email)
                if not users.verify_password(user, dto.password) or user is None:
                    raise AuthError(ErrorKind.INVALID_CREDENTIALS)

                user_id = str(user.id)
                access, refresh = self._issue_pair(user_id, user.email)
                # Overwrites any previous session of this user.
                user.refresh_token = refresh
                user.last_login_at = self.now_utc()
                users.save(user)
                public = UserPublicOut.from_model(user)

        logger.info("User logged in", extra={"user_id": user_id})
        return AuthResultOut(user=public, access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AccessTokenOut:
        """
        Exchange the user's active refresh token for a new access token.

        The refresh token itself is not rotated; it stays valid until the
        next login or logout of the same user, or until it expires.

        :param dto: Refresh input.
        :returns: A new access token.
        :raises AuthError: ``INVALID_REFRESH_TOKEN`` or ``PERSISTENCE_FAILURE``.
        """
        presented = dto.refresh_token
        try:
            token = self.codec.verify(presented)
        except TokenVerificationError as exc:
            logger.info("Refresh rejected: %s", exc, extra={"kind": "expired" if exc.expired else "invalid"})
            raise AuthError(ErrorKind.INVALID_REFRESH_TOKEN) from exc

        if token.kind is not TokenKind.REFRESH:
            raise AuthError(ErrorKind.INVALID_REFRESH_TOKEN)

        with self.persistence_guard("refresh"):
            with self.ro_uow() as uow:
                user = uow.users.find_by_id(token.subject_id)
                active = user.refresh_token if user is not None else None
                email = user.email if user is not None else None

        if active is None or email is None or not _same_token(active, presented):
            logger.info("Refresh rejected: stale token", extra={"user_id": token.subject_id})
            raise AuthError(ErrorKind.INVALID_REFRESH_TOKEN)

        access = self.codec.issue(token.subject_id, email, TokenKind.ACCESS)
        return AccessTokenOut(access_token=access)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, user_id: str) -> None:
        """
        Clear the user's active refresh token. Idempotent.

        :param user_id: Identity id (string form).
        :raises AuthError: ``PERSISTENCE_FAILURE`` only.
        """
        with self.persistence_guard("logout"):
            with self.rw_uow() as uow:
                uow.users.update_partial(user_id, refresh_token=None)
        logger.info("User logged out", extra={"user_id": str(user_id)})

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, user_id: str, email: str) -> tuple[str, str]:
        access = self.codec.issue(user_id, email, TokenKind.ACCESS)
        refresh = self.codec.issue(user_id, email, TokenKind.REFRESH)
        return access, refresh


def _same_token(stored: str, presented: str) -> bool:
    return hmac.compare_digest(stored.encode("utf-8"), presented.encode("utf-8"))
