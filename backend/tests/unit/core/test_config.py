"""Unit tests for environment-driven configuration helpers."""

from __future__ import annotations

from datetime import timedelta

import pytest

from auth_api.core.config import (
    CONFIG_MAP,
    DevelopmentConfig,
    MIN_SECRET_LENGTH,
    ProductionConfig,
    ensure_secrets,
    get_config,
    parse_duration,
    redis_url_from_env,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1h", timedelta(hours=1)),
        ("7d", timedelta(days=7)),
        ("15m", timedelta(minutes=15)),
        ("30s", timedelta(seconds=30)),
        ("45", timedelta(seconds=45)),
        (" 2H ", timedelta(hours=2)),
        (90, timedelta(seconds=90)),
    ],
)
def test_parse_duration_accepts_compact_literals(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "h", "1w", "one hour", "-5m", "1.5h"])
def test_parse_duration_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


class TestGetConfig:
    def test_defaults_to_development(self, monkeypatch):
        monkeypatch.delenv("APP_ENV", raising=False)
        assert get_config() is DevelopmentConfig

    def test_unknown_name_falls_back_to_development(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "staging")
        assert get_config() is DevelopmentConfig

    def test_selects_by_name_case_insensitively(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", " Production ")
        assert get_config() is ProductionConfig
        assert set(CONFIG_MAP) == {"development", "testing", "production"}


class TestEnsureSecrets:
    strong = "x" * MIN_SECRET_LENGTH

    def test_skipped_in_debug_and_testing(self):
        ensure_secrets({"DEBUG": True, "SECRET_KEY": "CHANGE_ME", "JWT_SECRET_KEY": "short"})
        ensure_secrets({"TESTING": True, "SECRET_KEY": "", "JWT_SECRET_KEY": ""})

    def test_rejects_placeholder_in_production(self):
        with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
            ensure_secrets({"SECRET_KEY": self.strong, "JWT_SECRET_KEY": "CHANGE_ME_JWT"})

    def test_rejects_short_secret(self):
        with pytest.raises(RuntimeError, match="SECRET_KEY"):
            ensure_secrets({"SECRET_KEY": "too-short", "JWT_SECRET_KEY": self.strong})

    def test_accepts_strong_secrets(self):
        ensure_secrets({"SECRET_KEY": self.strong, "JWT_SECRET_KEY": self.strong})


class TestRedisUrlFromEnv:
    def test_prefers_explicit_url(self, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "redis://cache:6380/2")
        monkeypatch.setenv("REDIS_HOST", "ignored")
        assert redis_url_from_env() == "redis://cache:6380/2"

    def test_builds_from_host_port_password(self, monkeypatch):
        monkeypatch.delenv("REDIS_URL", raising=False)
        monkeypatch.setenv("REDIS_HOST", "cache")
        monkeypatch.setenv("REDIS_PORT", "6390")
        monkeypatch.setenv("REDIS_PASSWORD", "s3cret")
        assert redis_url_from_env() == "redis://:s3cret@cache:6390/0"

    def test_disabled_without_host(self, monkeypatch):
        monkeypatch.delenv("REDIS_URL", raising=False)
        monkeypatch.delenv("REDIS_HOST", raising=False)
        assert redis_url_from_env() is None
