"""HTTP-level tests for the /api/v1/auth endpoints."""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory

BASE = "/api/v1/auth"
JOHN = {
    "first_name": "John",
    "last_name": "Doe",
    "email": "john@example.com",
    "password": "password123",
}


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _register(client, payload=None):
    return client.post(f"{BASE}/register", json=payload or JOHN)


def _login(client, email="john@example.com", password="password123"):
    return client.post(f"{BASE}/login", json={"email": email, "password": password})


class TestRegisterEndpoint:
    def test_created_with_projection_and_tokens(self, client):
        resp = _register(client)

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["access_token"] and data["refresh_token"]
        assert data["user"]["email"] == "john@example.com"
        assert data["user"]["is_email_verified"] is False
        assert not {"password", "password_hash", "refresh_token"} & data["user"].keys()

    def test_duplicate_email_is_conflict(self, client):
        _register(client)

        resp = _register(client, {**JOHN, "email": "JOHN@example.com"})

        assert resp.status_code == 409
        assert resp.mimetype == "application/problem+json"
        body = resp.get_json()
        assert body["code"] == "duplicate_email"
        assert body["detail"] == "Email already registered"
        assert body["request_id"]

    def test_validation_errors_are_422(self, client):
        resp = _register(client, {**JOHN, "first_name": "J", "password": "short"})

        assert resp.status_code == 422
        errors = resp.get_json()["details"]["errors"]
        assert set(errors) == {"first_name", "password"}

    def test_non_object_body_is_400(self, client):
        resp = client.post(f"{BASE}/register", json=["not", "an", "object"])
        assert resp.status_code == 400


class TestLoginEndpoint:
    def test_success(self, client):
        UserFactory(email="john@example.com", password="password123")

        resp = _login(client)

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["user"]["last_login_at"] is not None
        assert data["access_token"] and data["refresh_token"]

    @pytest.mark.parametrize(
        ("email", "password"),
        [("john@example.com", "wrong"), ("nobody@example.com", "password123")],
    )
    def test_bad_credentials_are_identical_401s(self, client, email, password):
        UserFactory(email="john@example.com", password="password123")

        resp = _login(client, email, password)

        assert resp.status_code == 401
        body = resp.get_json()
        assert body["code"] == "invalid_credentials"
        assert body["detail"] == "Invalid credentials"


class TestRefreshEndpoint:
    def test_exchange_returns_access_token_only(self, client):
        tokens = _register(client).get_json()["data"]

        resp = client.post(f"{BASE}/refresh-token", json={"refresh_token": tokens["refresh_token"]})

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert set(data) == {"access_token"}

    def test_access_token_is_rejected(self, client):
        tokens = _register(client).get_json()["data"]

        resp = client.post(f"{BASE}/refresh-token", json={"refresh_token": tokens["access_token"]})

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "invalid_refresh_token"

    def test_missing_token_is_422(self, client):
        assert client.post(f"{BASE}/refresh-token", json={}).status_code == 422


class TestProtectedEndpoints:
    def test_me_requires_token(self, client):
        resp = client.get(f"{BASE}/me")

        assert resp.status_code == 401
        assert resp.get_json()["detail"] == "No token provided"

    def test_me_returns_current_user(self, client):
        tokens = _register(client).get_json()["data"]

        resp = client.get(f"{BASE}/me", headers=_auth(tokens["access_token"]))

        assert resp.status_code == 200
        assert resp.get_json()["data"]["email"] == "john@example.com"
        assert "X-Cache" not in resp.headers

    def test_refresh_token_cannot_call_me(self, client):
        tokens = _register(client).get_json()["data"]

        resp = client.get(f"{BASE}/me", headers=_auth(tokens["refresh_token"]))

        assert resp.status_code == 401
        assert resp.get_json()["detail"] == "Invalid token type"

    def test_logout_is_204_and_idempotent(self, client):
        tokens = _register(client).get_json()["data"]
        headers = _auth(tokens["access_token"])

        assert client.post(f"{BASE}/logout", headers=headers).status_code == 204
        assert client.post(f"{BASE}/logout", headers=headers).status_code == 204

        resp = client.post(f"{BASE}/refresh-token", json={"refresh_token": tokens["refresh_token"]})
        assert resp.status_code == 401

    def test_logout_requires_token(self, client):
        assert client.post(f"{BASE}/logout").status_code == 401


class TestSessionEndpoint:
    def test_anonymous(self, client):
        resp = client.get(f"{BASE}/session")

        assert resp.status_code == 200
        assert resp.get_json()["data"] == {"authenticated": False, "user": None}

    def test_invalid_token_is_treated_as_anonymous(self, client):
        resp = client.get(f"{BASE}/session", headers=_auth("garbage"))

        assert resp.status_code == 200
        assert resp.get_json()["data"]["authenticated"] is False

    def test_authenticated(self, client):
        tokens = _register(client).get_json()["data"]

        resp = client.get(f"{BASE}/session", headers=_auth(tokens["access_token"]))

        data = resp.get_json()["data"]
        assert data["authenticated"] is True
        assert data["user"]["email"] == "john@example.com"


def test_full_session_scenario(client):
    """Register, duplicate, bad login, login, refresh, re-login, logout over HTTP."""
    assert _register(client).status_code == 201
    assert _register(client).status_code == 409
    assert _login(client, password="wrong").status_code == 401

    first = _login(client).get_json()["data"]
    token_a = first["refresh_token"]
    assert client.post(f"{BASE}/refresh-token", json={"refresh_token": token_a}).status_code == 200

    second = _login(client).get_json()["data"]
    token_b = second["refresh_token"]
    assert token_b != token_a
    assert client.post(f"{BASE}/refresh-token", json={"refresh_token": token_a}).status_code == 401
    assert client.post(f"{BASE}/refresh-token", json={"refresh_token": token_b}).status_code == 200

    assert client.post(f"{BASE}/logout", headers=_auth(second["access_token"])).status_code == 204
    assert client.post(f"{BASE}/refresh-token", json={"refresh_token": token_b}).status_code == 401
