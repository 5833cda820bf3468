"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from auth_api.core.errors import BadRequest
from auth_api.services import get_gate, get_response_cache

F = TypeVar("F", bound=Callable[..., Any])

CACHE_HEADER = "X-Cache"


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def json_body() -> dict[str, Any]:
    """Return the parsed JSON object body; a missing body counts as ``{}``."""

    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise BadRequest()
    return payload


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


def _attach(ctx) -> None:
    g.current_user = ctx.user if ctx else None
    g.access_token = ctx.token if ctx else None
    g.token_payload = ctx.payload if ctx else None


def authenticate(func: F) -> F:
    """Require a valid bearer access token; failures become 401 problems."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        _attach(get_gate().resolve(request.headers.get("Authorization")))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Attach the caller's identity when a valid access token is present."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        _attach(get_gate().resolve_optional(request.headers.get("Authorization")))
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def cache_response(
    key: Callable[[], str] | None = None, ttl: int | None = None
) -> Callable[[F], F]:
    """
    Serve GET responses from the Redis response cache.

    :param key: Builds the cache key; defaults to the full request path.
    :param ttl: Entry lifetime in seconds; defaults to the cache's TTL.

    Only ``200`` JSON bodies are stored. Without a configured cache the
    handler simply runs.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            cache = get_response_cache()
            if cache is None or request.method != "GET":
                return func(*args, **kwargs)

            cache_key = key() if key is not None else request.full_path.rstrip("?")
            cached = cache.get(cache_key)
            if cached is not None:
                response = json_response(cached)
                response.headers[CACHE_HEADER] = "HIT"
                return response

            response = current_app.make_response(func(*args, **kwargs))
            if response.status_code == 200 and response.is_json:
                cache.set(cache_key, response.get_json(), ttl=ttl)
            response.headers[CACHE_HEADER] = "MISS"
            return response

        return wrapper  # type: ignore[return-value]

    return decorator
