"""Unit tests for request validation ahead of the session service."""

from __future__ import annotations

import pytest
from marshmallow import ValidationError

from auth_api.services.auth import (
    LoginIn,
    RegisterIn,
    validate_login,
    validate_refresh,
    validate_registration,
)

VALID = {
    "first_name": "John",
    "last_name": "Doe",
    "email": "john@example.com",
    "password": "password123",
}


def test_valid_registration_is_normalized():
    dto = validate_registration({**VALID, "first_name": "  John ", "email": " John@Example.COM "})

    assert dto == RegisterIn(
        first_name="John", last_name="Doe", email="john@example.com", password="password123"
    )


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("first_name", "J"),
        ("first_name", "  J  "),
        ("last_name", ""),
        ("email", "not-an-email"),
        ("email", "a" * 250 + "@example.com"),
        ("password", "short12"),
        ("password", "x" * 129),
    ],
)
def test_invalid_registration_field(field, value):
    with pytest.raises(ValidationError) as info:
        validate_registration({**VALID, field: value})
    assert field in info.value.messages


@pytest.mark.parametrize("missing", sorted(VALID))
def test_registration_requires_every_field(missing):
    data = {k: v for k, v in VALID.items() if k != missing}
    with pytest.raises(ValidationError) as info:
        validate_registration(data)
    assert missing in info.value.messages


def test_registration_rejects_unknown_fields():
    with pytest.raises(ValidationError) as info:
        validate_registration({**VALID, "is_email_verified": True})
    assert "is_email_verified" in info.value.messages


def test_login_accepts_any_non_empty_password():
    assert validate_login({"email": "John@Example.com", "password": "x"}) == LoginIn(
        email="john@example.com", password="x"
    )


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "john@example.com", "password": ""},
        {"email": "john@example.com"},
        {"email": "nope", "password": "password123"},
    ],
)
def test_invalid_login_payload(payload):
    with pytest.raises(ValidationError):
        validate_login(payload)


def test_refresh_requires_token():
    assert validate_refresh({"refresh_token": "abc"}).refresh_token == "abc"
    with pytest.raises(ValidationError):
        validate_refresh({})
    with pytest.raises(ValidationError):
        validate_refresh({"refresh_token": ""})
