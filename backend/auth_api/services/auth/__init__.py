"""Session lifecycle: validation, the auth service and the request gate."""

from auth_api.services.auth.dto import (
    AccessTokenOut,
    AuthContext,
    AuthResultOut,
    AuthTokenConfig,
    LoginIn,
    RefreshIn,
    RegisterIn,
    UserPublicOut,
)
from auth_api.services.auth.gate import AuthenticationGate
from auth_api.services.auth.service import AuthService
from auth_api.services.auth.validation import (
    validate_login,
    validate_refresh,
    validate_registration,
)

__all__ = [
    "AccessTokenOut",
    "AuthContext",
    "AuthResultOut",
    "AuthService",
    "AuthTokenConfig",
    "AuthenticationGate",
    "LoginIn",
    "RefreshIn",
    "RegisterIn",
    "UserPublicOut",
    "validate_login",
    "validate_refresh",
    "validate_registration",
]
