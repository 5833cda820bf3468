"""Explicit input validation for the session lifecycle, run before any entity is built."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from auth_api.repositories.user import normalize_email
from auth_api.schemas.auth import LoginSchema, RefreshSchema, RegisterSchema
from auth_api.services.auth.dto import LoginIn, RefreshIn, RegisterIn

_register_schema = RegisterSchema()
_login_schema = LoginSchema()
_refresh_schema = RefreshSchema()


def validate_registration(fields: Mapping[str, Any]) -> RegisterIn:
    """
    Validate raw registration fields and build the input DTO.

    :param fields: Untrusted mapping (usually a parsed JSON body).
    :returns: Normalized registration input.
    :raises marshmallow.ValidationError: With per-field messages.
    """
    data = _register_schema.load(dict(fields))
    return RegisterIn(
        first_name=data["first_name"],
        last_name=data["last_name"],
        email=normalize_email(data["email"]),
        password=data["password"],
    )


def validate_login(fields: Mapping[str, Any]) -> LoginIn:
    data = _login_schema.load(dict(fields))
    return LoginIn(email=normalize_email(data["email"]), password=data["password"])


def validate_refresh(fields: Mapping[str, Any]) -> RefreshIn:
    data = _refresh_schema.load(dict(fields))
    return RefreshIn(refresh_token=data["refresh_token"])
