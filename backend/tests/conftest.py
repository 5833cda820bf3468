"""Pytest fixtures for the auth API.

The Flask app is built once per session; every test gets freshly created
tables on an in-memory SQLite database (shared through a static pool) so
data changes never leak between cases.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any

import fakeredis
import pytest
from flask import Flask

from auth_api.core.config import TestingConfig
from auth_api.core.extensions import db as _db
from auth_api.factory import create_app
from auth_api.infra.jwt import JWTTokenCodec
from auth_api.infra.redis import RedisResponseCache
from auth_api.services import RESPONSE_CACHE_KEY
from auth_api.services.auth import AuthenticationGate, AuthService, AuthTokenConfig


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Disables rate limiting and Redis; cache tests inject fakeredis.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app() -> Flask:
    """Create a Flask application configured for testing."""
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestConfig)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture()
def session(app: Flask) -> Generator[Any, None, None]:
    """Push an app context and provide the scoped session over fresh tables."""
    with app.app_context():
        _db.create_all()
        try:
            yield _db.session
        finally:
            _db.session.remove()
            _db.drop_all()


@pytest.fixture()
def db(session):
    """Database extension bound to the testing application (tables ready)."""
    return _db


@pytest.fixture()
def client(app: Flask, session):
    """Return a Flask test client sharing the test's app context."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper to the per-test session, when one is used."""
    from tests.factories import SQLAlchemySession

    if "session" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)


# -- Services ------------------------------------------------------------------
@pytest.fixture()
def token_cfg(app: Flask) -> AuthTokenConfig:
    return AuthTokenConfig(
        access_expires=app.config["JWT_ACCESS_TOKEN_EXPIRES"],
        refresh_expires=app.config["JWT_REFRESH_TOKEN_EXPIRES"],
    )


@pytest.fixture()
def codec(token_cfg: AuthTokenConfig) -> JWTTokenCodec:
    return JWTTokenCodec(token_cfg)


@pytest.fixture()
def auth_service(session, codec) -> AuthService:
    return AuthService(codec=codec)


@pytest.fixture()
def gate(session, codec) -> AuthenticationGate:
    return AuthenticationGate(codec=codec)


@pytest.fixture()
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture()
def response_cache(app: Flask, fake_redis) -> Generator[RedisResponseCache, None, None]:
    """Install a fakeredis-backed response cache on the app for one test."""
    cache = RedisResponseCache(fake_redis, default_ttl=60)
    app.extensions[RESPONSE_CACHE_KEY] = cache
    try:
        yield cache
    finally:
        app.extensions.pop(RESPONSE_CACHE_KEY, None)


@pytest.fixture()
def freeze_time() -> Callable[..., Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> with freeze_time("2025-01-01 12:00:00"):
    ...     ...
    """
    from freezegun import freeze_time as _freeze_time

    return _freeze_time
