"""HTTP-level tests for the cached /auth/me response."""

from __future__ import annotations

BASE = "/api/v1/auth"


def _session_tokens(client) -> dict:
    payload = {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "password": "password123",
    }
    return client.post(f"{BASE}/register", json=payload).get_json()["data"]


def test_me_is_cached_per_user(client, response_cache):
    data = _session_tokens(client)
    headers = {"Authorization": f"Bearer {data['access_token']}"}
    user_id = data["user"]["id"]

    first = client.get(f"{BASE}/me", headers=headers)
    second = client.get(f"{BASE}/me", headers=headers)

    assert first.headers["X-Cache"] == "MISS"
    assert second.headers["X-Cache"] == "HIT"
    assert first.get_json() == second.get_json()
    assert response_cache.get(f"me:{user_id}") == first.get_json()


def test_unauthenticated_requests_are_not_cached(client, response_cache, fake_redis):
    resp = client.get(f"{BASE}/me")

    assert resp.status_code == 401
    assert "X-Cache" not in resp.headers
    assert fake_redis.dbsize() == 0


def test_logout_evicts_cached_profile(client, response_cache):
    data = _session_tokens(client)
    headers = {"Authorization": f"Bearer {data['access_token']}"}
    user_id = data["user"]["id"]
    client.get(f"{BASE}/me", headers=headers)
    assert response_cache.get(f"me:{user_id}") is not None

    client.post(f"{BASE}/logout", headers=headers)

    assert response_cache.get(f"me:{user_id}") is None
