"""Environment-driven settings for the auth API.

One class per deployment flavour; `APP_ENV` picks which one `create_app` loads.
Durations use the compact `15m` / `1h` / `7d` notation.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"

# Placeholders that must never reach production
PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset({"CHANGE_ME", "CHANGE_ME_JWT"})
MIN_SECRET_LENGTH: Final[int] = 32

# Load .env in development (no-op when the file is missing)
load_dotenv()

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}
_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """Read a yes/no flag; an unset variable yields ``default``."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def parse_duration(raw: str | int) -> timedelta:
    """Parse a compact duration such as ``"15m"``, ``"1h"`` or ``"7d"``.

    Parameters
    ----------
    raw: str | int
        Duration literal. Bare integers are read as seconds.

    Returns
    -------
    datetime.timedelta
        Parsed duration.

    Raises
    ------
    ValueError
        If the literal does not match ``<int>[s|m|h|d]``.
    """
    if isinstance(raw, int):
        return timedelta(seconds=raw)
    match = _DURATION_RE.match(raw or "")
    if match is None:
        raise ValueError(f"Invalid duration literal: {raw!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def redis_url_from_env() -> str | None:
    """Return ``REDIS_URL`` or build one from ``REDIS_HOST``/``REDIS_PORT``/``REDIS_PASSWORD``."""
    url = os.getenv("REDIS_URL")
    if url:
        return url
    host = os.getenv("REDIS_HOST")
    if not host:
        return None
    port = os.getenv("REDIS_PORT", "6379")
    password = os.getenv("REDIS_PASSWORD")
    auth = f":{password}@" if password else ""
    return f"redis://{auth}{host}:{port}/0"


def _default_rate_limit() -> str:
    max_requests = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
    window_minutes = int(os.getenv("RATE_LIMIT_WINDOW", "15"))
    return f"{max_requests} per {window_minutes} minutes"


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development placeholder.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` to sign access and refresh tokens.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access token lifetime (``JWT_EXPIRATION``, default ``1h``).
    JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Refresh token lifetime (``JWT_REFRESH_EXPIRATION``, default ``7d``).
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Response cache backend. ``None`` disables caching.
    REDIS_TTL: int
        Default response cache lifetime in seconds.
    RATELIMIT_DEFAULT: str
        Global Flask-Limiter policy applied to every route.
    AUTH_LOGIN_RATE_LIMIT: str
        Stricter policy applied to ``POST /auth/login``.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    METRICS_ENABLED: bool
        Expose Prometheus request metrics on ``GET /metrics``.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", "CHANGE_ME_JWT")
    JWT_ACCESS_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_EXPIRATION", "1h"))
    JWT_REFRESH_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_REFRESH_EXPIRATION", "7d"))
    JWT_TOKEN_LOCATION = ["headers"]

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Cache
    REDIS_URL = redis_url_from_env()
    REDIS_TTL = int(os.getenv("REDIS_TTL", "3600"))

    # Rate limiting
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_DEFAULT = _default_rate_limit()
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, CORS & proxy
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    CORS_MAX_AGE = 600
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Metrics
    METRICS_ENABLED = env_bool("METRICS_ENABLED", True)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default, which also relaxes the secret checks in
    :func:`ensure_secrets`.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables rate limiting.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis; tests inject a fake cache explicitly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = "testing-jwt-secret-key-0123456789abcdef"
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Config class named by ``APP_ENV``; anything unrecognised means development."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "").strip().lower(), DevelopmentConfig)


def ensure_secrets(config: Mapping[str, object]) -> None:
    """Refuse to run outside debug/testing with placeholder or short secrets.

    :param config: Loaded Flask configuration mapping.
    :raises RuntimeError: When ``SECRET_KEY`` or ``JWT_SECRET_KEY`` is unsafe.
    """
    if config.get("DEBUG") or config.get("TESTING"):
        return
    for key in ("SECRET_KEY", "JWT_SECRET_KEY"):
        value = str(config.get(key) or "")
        if value in PLACEHOLDER_SECRETS or len(value) < MIN_SECRET_LENGTH:
            raise RuntimeError(
                f"{key} must be set to a value of at least {MIN_SECRET_LENGTH} characters."
            )
