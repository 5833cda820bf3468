# auth_api/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from auth_api.services._shared.ports import SessionToken

if TYPE_CHECKING:
    from auth_api.models.user import User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration (already validated).

    :param first_name: Given name, trimmed.
    :type first_name: str
    :param last_name: Family name, trimmed.
    :type last_name: str
    :param email: User email (normalized).
    :type email: str
    :param password: Raw password (hashed at write time).
    :type password: str
    """

    first_name: str
    last_name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Client-safe projection of a user.

    Never carries the password hash or the stored refresh token.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    is_email_verified: bool
    last_login_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        return cls(
            id=str(user.id),
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            is_email_verified=bool(user.is_email_verified),
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Output DTO for register/login: public user plus a token pair.

    :param user: Public projection of the identity.
    :type user: UserPublicOut
    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    user: UserPublicOut
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AccessTokenOut:
    access_token: str


@dataclass(frozen=True, slots=True)
class AuthContext:
    """
    What the authentication gate attaches to a request.

    :param user: Resolved identity (public projection).
    :param token: Raw bearer token as presented.
    :param payload: Verified token payload.
    """

    user: UserPublicOut
    token: str
    payload: SessionToken

    @property
    def claims(self) -> dict[str, Any]:
        return dict(self.payload.claims)


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_expires: timedelta
    refresh_expires: timedelta

    def lifetime_for(self, kind: str) -> timedelta:
        return self.refresh_expires if kind == "refresh" else self.access_expires
