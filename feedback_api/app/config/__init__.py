"""Application configuration utilities.

Values are loaded from environment variables (and an optional ``.env``
file). The :func:`get_settings` helper caches the result.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheBackend(str, Enum):
    """Where tenant lookups are memoized."""

    MEMORY = "memory"
    REDIS = "redis"
    NONE = "none"


class Settings(BaseSettings):
    """Application settings read from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./feedback.db"
    db_pool_size: int = 5
    redis_url: str | None = None
    org_cache_backend: CacheBackend = CacheBackend.MEMORY
    org_cache_ttl_sec: float = 30.0
    allowed_origins: list[str] = []
    log_level: str = "INFO"
    error_dsn: str | None = None
    slow_query_ms: int = 200

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


# Cached singleton to avoid re-reading the environment
@lru_cache
def get_settings() -> Settings:
    """Return application settings; environment variables take precedence."""

    return Settings()


__all__ = ["CacheBackend", "Settings", "get_settings"]
