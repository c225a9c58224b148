from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from authgate.shared.config import AppConfig, DatabaseConfig, SecurityConfig
from authgate.tests.fakes import CLIENT_URL, TEST_SECRET, make_config


def test_cookie_lifetime_must_match_token_ttl() -> None:
    with pytest.raises(ValidationError, match="JWT_COOKIE_EXPIRES_IN must match"):
        SecurityConfig(JWT_SECRET=TEST_SECRET, JWT_EXPIRES_IN="1h", JWT_COOKIE_EXPIRES_IN=7)


def test_token_ttl_accepts_units() -> None:
    security = SecurityConfig(JWT_SECRET=TEST_SECRET, JWT_EXPIRES_IN="2d", JWT_COOKIE_EXPIRES_IN=2)

    assert security.token_ttl == timedelta(days=2)
    assert security.cookie_lifetime == timedelta(days=2)


def test_invalid_ttl_rejected() -> None:
    with pytest.raises(ValidationError):
        SecurityConfig(JWT_SECRET=TEST_SECRET, JWT_EXPIRES_IN="soon")


def test_client_url_is_normalized() -> None:
    security = SecurityConfig(JWT_SECRET=TEST_SECRET, CLIENT_URL=" https://app.example.com/ ")

    assert security.client_url == "https://app.example.com"


def test_production_requires_real_secret() -> None:
    with pytest.raises(ValidationError, match="Insecure JWT_SECRET"):
        AppConfig(
            APP_ENV="production",
            database=DatabaseConfig(DATABASE_URL="sqlite://"),
            security=SecurityConfig(JWT_SECRET="dev", CLIENT_URL=CLIENT_URL),
        )


def test_production_requires_client_url() -> None:
    with pytest.raises(ValidationError, match="CLIENT_URL is required"):
        AppConfig(
            APP_ENV="production",
            database=DatabaseConfig(DATABASE_URL="sqlite://"),
            security=SecurityConfig(JWT_SECRET=TEST_SECRET),
        )


def test_development_cookie_policy() -> None:
    config = make_config()

    assert config.is_production() is False
    assert config.cookie_secure is False
    assert config.cookie_samesite == "Strict"
    assert config.cors_origins == ["http://localhost:5173", "http://localhost:3000"]


def test_production_cookie_policy() -> None:
    config = make_config(app_env="production", client_url=CLIENT_URL)

    assert config.is_production() is True
    assert config.cookie_secure is True
    assert config.cookie_samesite == "None"
    assert config.cors_origins == [CLIENT_URL]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("", ""), ("api", "/api"), ("/api/", "/api"), ("/v1/api", "/v1/api")],
)
def test_api_prefix_normalized(raw: str, expected: str) -> None:
    config = AppConfig(
        API_PREFIX=raw,
        database=DatabaseConfig(DATABASE_URL="sqlite://"),
        security=SecurityConfig(JWT_SECRET=TEST_SECRET),
    )

    assert config.api_prefix == expected
