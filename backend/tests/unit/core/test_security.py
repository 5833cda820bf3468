"""Unit tests for password hashing helpers."""

from __future__ import annotations

import pytest

from auth_api.core.security import burn_password_check, dummy_hash, hash_password, verify_password


def test_hash_is_salted_and_verifiable():
    first = hash_password("password123")
    second = hash_password("password123")

    assert first != second
    assert "password123" not in first
    assert verify_password("password123", first)
    assert verify_password("password123", second)


def test_wrong_candidate_does_not_verify():
    hashed = hash_password("password123")
    assert not verify_password("password124", hashed)


@pytest.mark.parametrize("stored", [None, ""])
def test_missing_hash_never_matches(stored):
    assert not verify_password("anything", stored)


def test_empty_password_is_rejected():
    with pytest.raises(ValueError):
        hash_password("")


def test_dummy_check_never_matches_and_is_cached():
    assert dummy_hash() is dummy_hash()
    assert burn_password_check("password123") is None
