"""Unit tests for the User model mapping and constraints."""

from __future__ import annotations

from uuid import UUID

import pytest
from sqlalchemy.exc import IntegrityError

from auth_api.models.user import User
from tests.factories.user import UserFactory


class TestUserModel:
    def test_defaults_after_insert(self, session):
        user = UserFactory(email="defaults@example.com")

        assert isinstance(user.id, UUID)
        assert user.is_email_verified is False
        assert user.refresh_token is None
        assert user.last_login_at is None
        assert user.deleted_at is None
        assert user.created_at is not None
        assert user.updated_at is not None

    def test_email_is_unique(self, session):
        UserFactory(email="dup@example.com")

        session.add(User(first_name="Jane", last_name="Roe", email="dup@example.com", password_hash="x"))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_password_hash_never_equals_plaintext(self, session):
        user = UserFactory(password="password123")
        assert user.password_hash
        assert user.password_hash != "password123"

    def test_repr_mentions_id(self, session):
        user = UserFactory()
        assert str(user.id) in repr(user)

    def test_unique_constraint_name(self):
        names = {c.name for c in User.__table__.constraints}
        assert "uq_users_email" in names
