"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, g

from auth_api.api.deps import (
    authenticate,
    cache_response,
    json_body,
    json_response,
    optional_auth,
    timing,
)
from auth_api.core.extensions import limiter
from auth_api.schemas import (
    AccessTokenSchema,
    AuthResponseSchema,
    SessionStateSchema,
    UserSchema,
)
from auth_api.services import get_auth_service, get_response_cache
from auth_api.services.auth.validation import (
    validate_login,
    validate_refresh,
    validate_registration,
)

bp = Blueprint("auth", __name__)

auth_response_schema = AuthResponseSchema()
access_token_schema = AccessTokenSchema()
user_schema = UserSchema()
session_schema = SessionStateSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


def me_cache_key(user_id: str) -> str:
    return f"me:{user_id}"


@bp.post("/register")
@timing
def register():
    """Register a new user and open its first session."""

    dto = validate_registration(json_body())
    result = get_auth_service().register(dto)
    return json_response({"data": auth_response_schema.dump(result)}, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    dto = validate_login(json_body())
    result = get_auth_service().login(dto)
    return json_response({"data": auth_response_schema.dump(result)})


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Exchange the active refresh token for a new access token."""

    dto = validate_refresh(json_body())
    result = get_auth_service().refresh(dto)
    return json_response({"data": access_token_schema.dump(result)})


@bp.post("/logout")
@authenticate
@timing
def logout():
    """End the caller's session and drop its cached profile."""

    user_id = g.current_user.id
    get_auth_service().logout(user_id)
    cache = get_response_cache()
    if cache is not None:
        cache.delete(me_cache_key(user_id))
    return "", 204


@bp.get("/me")
@authenticate
@cache_response(key=lambda: me_cache_key(g.current_user.id))
@timing
def me():
    """Return the authenticated user profile."""

    return json_response({"data": user_schema.dump(g.current_user)})


@bp.get("/session")
@optional_auth
@timing
def session_state():
    """Describe whether the caller is authenticated, without requiring it."""

    user = g.get("current_user")
    body = {"authenticated": user is not None, "user": user}
    return json_response({"data": session_schema.dump(body)})
