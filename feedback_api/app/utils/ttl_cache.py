"""Short-lived memoization for tenant lookups.

The cache is a performance aid only: every backend must be safe to swap
for :class:`NullCache` without changing behaviour.
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Protocol

from redis.asyncio import Redis


class TTLCache(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...


class NullCache:
    """Cache that never stores anything."""

    async def get(self, key: str) -> Any | None:
        return None

    async def set(self, key: str, value: Any) -> None:
        return None


class MemoryTTLCache:
    """Per-process cache with expiry; ``clock`` is injectable for tests."""

    def __init__(
        self, ttl: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._data: dict[str, tuple[Any, float]] = {}

    async def get(self, key: str) -> Any | None:
        hit = self._data.get(key)
        if hit is None:
            return None
        value, expires_at = hit
        if self._clock() >= expires_at:
            del self._data[key]
            return None
        return value

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = (value, self._clock() + self.ttl)

    def clear(self) -> None:
        self._data.clear()


class RedisTTLCache:
    """Cache shared across workers via Redis; values are stored as JSON."""

    def __init__(self, redis: Redis, ttl: float, prefix: str = "orgcache:") -> None:
        self.redis = redis
        self.ttl = ttl
        self.prefix = prefix

    async def get(self, key: str) -> Any | None:
        raw = await self.redis.get(self.prefix + key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        await self.redis.set(
            self.prefix + key, json.dumps(value), px=max(1, int(self.ttl * 1000))
        )


__all__ = ["TTLCache", "NullCache", "MemoryTTLCache", "RedisTTLCache"]
