"""Unit tests for environment-driven settings."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from shopapi.core.config import DEFAULT_DATABASE_URL
from shopapi.core.config import ConfigurationError
from shopapi.core.config import Settings
from shopapi.core.config import get_settings
from shopapi.core.config import load_settings

ENV_VARS = (
    "SHOPAPI_ENVIRONMENT",
    "SHOPAPI_DATABASE_URL",
    "SHOPAPI_JWT_SECRET",
    "SHOPAPI_JWT_EXPIRES_MINUTES",
    "SHOPAPI_LOG_LEVEL",
    "SHOPAPI_CORS_ORIGINS",
    "SHOPAPI_HOST",
    "SHOPAPI_PORT",
    "SHOPAPI_SQL_ECHO",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_are_development_friendly() -> None:
    settings = load_settings()

    assert settings.environment == "development"
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.jwt_expires_minutes == 60
    assert settings.cors_origins == ("*",)
    assert settings.port == 3000
    assert settings.sql_echo is False


def test_environment_overrides_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOPAPI_ENVIRONMENT", "Production")
    monkeypatch.setenv("SHOPAPI_JWT_SECRET", "prod-secret")
    monkeypatch.setenv("SHOPAPI_JWT_EXPIRES_MINUTES", "15")
    monkeypatch.setenv("SHOPAPI_CORS_ORIGINS", "https://a.shop.io, https://b.shop.io")
    monkeypatch.setenv("SHOPAPI_PORT", "8080")
    monkeypatch.setenv("SHOPAPI_SQL_ECHO", "true")
    monkeypatch.setenv("SHOPAPI_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.is_production
    assert settings.jwt_expires_minutes == 15
    assert settings.cors_origins == ("https://a.shop.io", "https://b.shop.io")
    assert settings.port == 8080
    assert settings.sql_echo is True
    assert settings.log_level == "DEBUG"


def test_production_requires_an_explicit_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOPAPI_ENVIRONMENT", "production")

    with pytest.raises(ConfigurationError):
        load_settings()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SHOPAPI_PORT", "eighty"),
        ("SHOPAPI_PORT", "70000"),
        ("SHOPAPI_JWT_EXPIRES_MINUTES", "0"),
        ("SHOPAPI_ENVIRONMENT", "staging"),
    ],
)
def test_invalid_values_fail_fast(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        load_settings()


def test_safe_for_logging_redacts_secrets() -> None:
    settings = Settings(
        environment="development",
        database_url="postgresql+psycopg://shop:s3cret@db:5432/shopapi",
        jwt_secret="very-secret",
    )

    safe = settings.safe_for_logging()

    assert safe["jwt_secret"] == "<redacted>"
    assert safe["database_url"] == "postgresql+psycopg://shop:<redacted>@db:5432/shopapi"
    assert "s3cret" not in str(safe)
    assert "very-secret" not in str(safe)


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
