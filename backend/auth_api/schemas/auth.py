"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import RAISE, Schema, fields, pre_load, validate


def _strip_strings(data: Any, keys: tuple[str, ...]) -> Any:
    if not isinstance(data, dict):
        return data
    cleaned = dict(data)
    for key in keys:
        if isinstance(cleaned.get(key), str):
            cleaned[key] = cleaned[key].strip()
    return cleaned


class RegisterSchema(Schema):
    """Input payload for account registration."""

    class Meta:
        unknown = RAISE

    first_name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    last_name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))

    @pre_load
    def _trim(self, data: Any, **kwargs: Any) -> Any:
        return _strip_strings(data, ("first_name", "last_name", "email"))


class LoginSchema(Schema):
    """Input payload for authenticating a user.

    The password is only required to be non-empty so a short wrong password
    fails as bad credentials, not as a validation error.
    """

    class Meta:
        unknown = RAISE

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @pre_load
    def _trim(self, data: Any, **kwargs: Any) -> Any:
        return _strip_strings(data, ("email",))


class RefreshSchema(Schema):
    """Input payload for exchanging a refresh token."""

    class Meta:
        unknown = RAISE

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class UserSchema(Schema):
    """Public projection of a user."""

    id = fields.String(required=True)
    first_name = fields.String(required=True)
    last_name = fields.String(required=True)
    email = fields.Email(required=True)
    is_email_verified = fields.Boolean(required=True)
    last_login_at = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class AuthResponseSchema(Schema):
    """Response payload for register/login."""

    user = fields.Nested(UserSchema, required=True)
    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)


class AccessTokenSchema(Schema):
    """Response payload containing a fresh access token."""

    access_token = fields.String(required=True)


class SessionStateSchema(Schema):
    """Response payload describing the caller's authentication state."""

    authenticated = fields.Boolean(required=True)
    user = fields.Nested(UserSchema, allow_none=True)
