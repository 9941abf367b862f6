"""Startup configuration validation."""

from __future__ import annotations

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from . import CacheBackend, Settings

logger = logging.getLogger("api.config")


def _mask(value: str) -> str:
    """Return a masked representation of ``value`` for logging."""
    if len(value) <= 4:
        return "*" * len(value)
    return value[:2] + "*" * (len(value) - 4) + value[-2:]


def validate_on_boot(settings: Settings) -> None:
    """Validate connection settings before the app starts serving.

    Logs masked values for audit and raises :class:`RuntimeError` when a
    setting is missing or malformed.
    """

    errors: list[str] = []

    try:
        url = make_url(settings.database_url)
    except ArgumentError:
        errors.append("DATABASE_URL is not a valid SQLAlchemy URL")
    else:
        logger.info(
            "database driver=%s host=%s",
            url.drivername,
            _mask(url.host or url.database or ""),
        )
        if settings.app_env == "prod" and url.get_backend_name() == "sqlite":
            errors.append("SQLite is not allowed when APP_ENV=prod")

    if settings.org_cache_backend is CacheBackend.REDIS and not settings.redis_url:
        errors.append("REDIS_URL is required when ORG_CACHE_BACKEND=redis")
    elif settings.redis_url:
        logger.info("redis url=%s", _mask(settings.redis_url))

    if settings.org_cache_ttl_sec < 0:
        errors.append("ORG_CACHE_TTL_SEC must not be negative")

    if errors:
        for message in errors:
            logger.error(message)
        raise RuntimeError("; ".join(errors))
