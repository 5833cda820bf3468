"""Flask extension singletons shared by the auth API.

Extensions are created unbound at import time and attached to an application
in :func:`init_app`, so blueprints and services can import them freely.
"""

from __future__ import annotations

import logging

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

logger = logging.getLogger(__name__)

# Constraint names must stay stable across SQLite and PostgreSQL migrations.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    session_options={"autoflush": False},
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

# Response cache backend; ``None`` means caching is disabled.
redis_client: redis.Redis | None = None


def connect_redis(url: str, *, timeout: float = 2.0) -> redis.Redis | None:
    """Open a Redis client for ``url`` or return ``None`` when unreachable.

    The cache is an optimisation, so an unreachable server is logged and the
    application keeps serving uncached responses.
    """
    client = redis.Redis.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
    try:
        client.ping()
    except RedisError as exc:
        logger.warning(
            "Redis unavailable, response cache disabled: %s", exc, extra={"kind": "cache"}
        )
        return None
    return client


def init_app(app: Flask) -> None:
    """Bind the database, migrations, JWT manager, limiter and cache client."""
    db.init_app(app)

    # Register mappers on the metadata before Flask-Migrate inspects it.
    from auth_api import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    global redis_client
    redis_url = app.config.get("REDIS_URL")
    redis_client = connect_redis(redis_url) if redis_url else None
    if redis_client is None:
        app.extensions.pop("redis_client", None)
    else:
        app.extensions["redis_client"] = redis_client
