"""Engine and session factory for the feedback database.

All tenants share one database; isolation is enforced by ``org_id``
filters in the repository helpers rather than by separate engines.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..models_tenant import Base
from ..obs import add_query_logger


def create_engine_for(
    url: str, pool_size: int = 5, slow_query_ms: int | None = None
) -> AsyncEngine:
    """Create an :class:`AsyncEngine` for ``url`` with query timing attached."""

    kwargs: dict = {"future": True}
    if make_url(url).get_backend_name() != "sqlite":
        kwargs["pool_size"] = pool_size
        kwargs["pool_pre_ping"] = True
    engine = create_async_engine(url, **kwargs)
    add_query_logger(engine, "feedback", slow_ms=slow_query_ms)
    return engine


def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables. Used by tests and the demo seed script."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session and ensure it is closed afterwards."""
    session = factory()
    try:
        yield session
    finally:
        await session.close()


__all__ = ["create_engine_for", "make_sessionmaker", "create_schema", "session_scope"]
