"""Marshmallow schemas for request validation and response shaping."""

from .auth import (
    AccessTokenSchema,
    AuthResponseSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    SessionStateSchema,
    UserSchema,
)

__all__ = [
    "AccessTokenSchema",
    "AuthResponseSchema",
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "SessionStateSchema",
    "UserSchema",
]
