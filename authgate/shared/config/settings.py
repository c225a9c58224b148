# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .durations import parse_duration

_INSECURE_SECRETS = ("dev", "development", "test", "secret", "changeme", "")

_SETTINGS_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    populate_by_name=True,
)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///authgate.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SETTINGS_CONFIG

    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class SecurityConfig(BaseSettings):
    # Token
    jwt_secret: str = Field("dev", alias="JWT_SECRET")
    jwt_expires_in: str = Field("7d", alias="JWT_EXPIRES_IN")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")

    # Cookie
    cookie_name: str = Field("jwt", alias="JWT_COOKIE_NAME")
    cookie_expires_days: int = Field(7, ge=1, alias="JWT_COOKIE_EXPIRES_IN")

    # Password hashing
    bcrypt_rounds: int = Field(12, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # Origin
    client_url: str | None = Field(None, alias="CLIENT_URL")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SETTINGS_CONFIG

    @field_validator("jwt_expires_in")
    @classmethod
    def _validate_ttl(cls, value: str) -> str:
        parse_duration(value)
        return value

    @field_validator("client_url", mode="before")
    @classmethod
    def _strip_client_url(cls, value: str | None) -> str | None:
        if isinstance(value, str):
            value = value.strip().rstrip("/")
            return value or None
        return value

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _cookie_matches_token(self) -> "SecurityConfig":
        if self.cookie_lifetime != self.token_ttl:
            raise ValueError(
                "JWT_COOKIE_EXPIRES_IN must match JWT_EXPIRES_IN "
                f"({self.cookie_expires_days}d != {self.jwt_expires_in})"
            )
        return self

    @property
    def token_ttl(self) -> timedelta:
        return parse_duration(self.jwt_expires_in)

    @property
    def cookie_lifetime(self) -> timedelta:
        return timedelta(days=self.cookie_expires_days)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    api_prefix: str = Field("", alias="API_PREFIX")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(5000, ge=1, le=65535, alias="PORT")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @field_validator("api_prefix", mode="before")
    @classmethod
    def _normalize_prefix(cls, value: str | None) -> str:
        value = (value or "").strip().rstrip("/")
        if value and not value.startswith("/"):
            value = "/" + value
        return value

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.security.jwt_secret in _INSECURE_SECRETS:
            raise ValueError(
                "Insecure JWT_SECRET in production. Generate one with: "
                "python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )
        if not self.security.client_url:
            raise ValueError("CLIENT_URL is required in production")

        if not self.security.enable_hsts:
            print(
                "\n⚠️  PRODUCTION SECURITY WARNING: HSTS is DISABLED (recommended for HTTPS)\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    @property
    def cookie_secure(self) -> bool:
        return self.is_production()

    @property
    def cookie_samesite(self) -> str:
        return "None" if self.is_production() else "Strict"

    @property
    def cors_origins(self) -> list[str]:
        if self.security.client_url:
            return [self.security.client_url]
        return ["http://localhost:5173", "http://localhost:3000"]


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "DatabaseConfig", "SecurityConfig", "load_config"]
