"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Runtime
    environment: Literal["development", "test", "staging", "production"] = Field(default="development")
    app_version: str = Field(default="0.1.0")

    # API Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")

    # Webhook log store
    webhook_log_backend: Literal["memory", "redis"] = Field(default="memory")
    # None keeps every entry until the next clear
    webhook_log_max_entries: int | None = Field(default=None, ge=1)
    webhook_log_redis_key: str = Field(default="webhook_inbox:logs")

    # Redis
    redis_url: RedisDsn = Field(default="redis://localhost:6379/0")
    redis_socket_timeout_seconds: float = Field(default=2.0, gt=0)

    # Hosted database (PostgREST / Supabase REST)
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    supabase_service_role_key: str = Field(default="")
    supabase_timeout_seconds: float = Field(default=10.0, gt=0)

    # Error reporting
    sentry_dsn: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SENTRY_DSN", "NEXT_PUBLIC_SENTRY_DSN"),
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
