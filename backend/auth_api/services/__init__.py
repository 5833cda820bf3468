"""Service wiring: builds the session service, the gate and the response cache per app."""

from __future__ import annotations

from typing import cast

from flask import Flask, current_app

from auth_api.services.auth.dto import AuthTokenConfig
from auth_api.services.auth.gate import AuthenticationGate
from auth_api.services.auth.service import AuthService

AUTH_SERVICE_KEY = "auth_service"
AUTH_GATE_KEY = "auth_gate"
RESPONSE_CACHE_KEY = "response_cache"


def init_app(app: Flask) -> None:
    """
    Construct the explicitly-wired services and store them on ``app.extensions``.

    The token codec is shared by the service and the gate; the response cache
    is only built when a Redis client was initialized.
    """
    from auth_api.core.extensions import redis_client
    from auth_api.infra.jwt import JWTTokenCodec
    from auth_api.infra.redis import RedisResponseCache

    token_cfg = AuthTokenConfig(
        access_expires=app.config["JWT_ACCESS_TOKEN_EXPIRES"],
        refresh_expires=app.config["JWT_REFRESH_TOKEN_EXPIRES"],
    )
    codec = JWTTokenCodec(token_cfg)
    app.extensions[AUTH_SERVICE_KEY] = AuthService(codec=codec)
    app.extensions[AUTH_GATE_KEY] = AuthenticationGate(codec=codec)

    if redis_client is not None:
        app.extensions[RESPONSE_CACHE_KEY] = RedisResponseCache(
            redis_client, default_ttl=int(app.config.get("REDIS_TTL", 3600))
        )
    else:
        app.extensions.pop(RESPONSE_CACHE_KEY, None)


def get_auth_service() -> AuthService:
    return cast(AuthService, current_app.extensions[AUTH_SERVICE_KEY])


def get_gate() -> AuthenticationGate:
    return cast(AuthenticationGate, current_app.extensions[AUTH_GATE_KEY])


def get_response_cache():
    """Return the configured response cache, or ``None`` when Redis is disabled."""
    return current_app.extensions.get(RESPONSE_CACHE_KEY)


__all__ = ["init_app", "get_auth_service", "get_gate", "get_response_cache"]
