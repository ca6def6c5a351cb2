# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_SECRETS = ("dev", "development", "test", "change-me", "")
_MIN_PRODUCTION_SECRET_LENGTH = 32

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


class DatabaseConfig(BaseSettings):
    url: str | None = Field(None, alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    connect_retries: int = Field(30, ge=1, alias="DB_CONNECT_RETRIES")
    connect_retry_interval: float = Field(1.0, ge=0.0, alias="DB_CONNECT_RETRY_INTERVAL")

    # Discrete connection parameters, used when DATABASE_URL is absent.
    host: str | None = Field(None, alias="DB_HOST")
    port: int = Field(5432, alias="DB_PORT")
    user: str | None = Field(None, alias="DB_USER")
    password: str | None = Field(None, alias="DB_PASSWORD")
    name: str | None = Field(None, alias="DB_NAME")

    model_config = _SECTION_CONFIG

    @model_validator(mode="after")
    def _resolve_url(self) -> "DatabaseConfig":
        if self.url:
            return self
        if not self.host:
            self.url = "sqlite:///gameauth.db"
            return self
        credentials = ""
        if self.user:
            credentials = quote_plus(self.user)
            if self.password:
                credentials += ":" + quote_plus(self.password)
            credentials += "@"
        self.url = (
            f"postgresql+psycopg://{credentials}{self.host}:{self.port}/{self.name or ''}"
        )
        return self

    def is_sqlite(self) -> bool:
        return bool(self.url and self.url.startswith("sqlite"))


class TokenConfig(BaseSettings):
    secret: str = Field("dev", alias="TOKEN_SECRET")
    ttl_seconds: int = Field(60 * 60 * 24, ge=1, alias="TOKEN_TTL_SECONDS")
    algorithm: str = Field("HS256", alias="TOKEN_ALGORITHM")

    model_config = _SECTION_CONFIG

    @field_validator("algorithm")
    @classmethod
    def _only_hmac(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("token algorithm must be one of HS256, HS384, HS512")
        return value


class HashingConfig(BaseSettings):
    method: str = Field("scrypt", alias="PASSWORD_HASH_METHOD")
    salt_length: int = Field(16, ge=8, alias="PASSWORD_SALT_LENGTH")

    model_config = _SECTION_CONFIG


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _token_config_factory() -> TokenConfig:
    return TokenConfig()  # type: ignore[call-arg]


def _hashing_config_factory() -> HashingConfig:
    return HashingConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3001, alias="PORT")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    token: TokenConfig = Field(default_factory=_token_config_factory)
    hashing: HashingConfig = Field(default_factory=_hashing_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
        validate_by_name=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        secret = self.token.secret
        if secret in _INSECURE_SECRETS or len(secret) < _MIN_PRODUCTION_SECRET_LENGTH:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure TOKEN_SECRET detected in production!\n"
                f"   TOKEN_SECRET must be a random value of at least "
                f"{_MIN_PRODUCTION_SECRET_LENGTH} characters.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(48))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        if self.database.is_sqlite():
            print(
                "\n⚠️  PRODUCTION WARNING: running on SQLite, set DATABASE_URL or DB_HOST.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "DatabaseConfig", "HashingConfig", "TokenConfig", "load_config"]
