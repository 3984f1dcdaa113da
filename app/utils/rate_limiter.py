"""
Fixed-window rate limiting.

Counts events per key inside a window that starts with the first event
and expires after a TTL. Two backends share one interface: Redis for
multi-instance deployments and an in-memory store for single-process
runs and tests.
"""

import time
from collections.abc import Callable
from typing import Any, Protocol

from loguru import logger
from redis.exceptions import RedisError


class RateLimiter(Protocol):
    """Fixed-window counter with TTL."""

    async def hit(self, key: str) -> int:
        """Record one event and return the count in the current window."""
        ...

    async def get_count(self, key: str) -> int:
        """Return the count in the current window without recording."""
        ...

    async def reset(self, key: str) -> None:
        """Forget all events for key."""
        ...


class InMemoryFixedWindowRateLimiter:
    """Process-local fixed-window counter."""

    def __init__(
        self,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize limiter.

        Args:
            window_seconds: Window length
            clock: Monotonic time source
        """
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, tuple[int, float]] = {}

    def _current(self, key: str) -> tuple[int, float] | None:
        entry = self._windows.get(key)
        if entry is None:
            return None
        if self.clock() >= entry[1]:
            del self._windows[key]
            return None
        return entry

    async def hit(self, key: str) -> int:
        entry = self._current(key)
        if entry is None:
            entry = (0, self.clock() + self.window_seconds)
        count = entry[0] + 1
        self._windows[key] = (count, entry[1])
        return count

    async def get_count(self, key: str) -> int:
        entry = self._current(key)
        return entry[0] if entry else 0

    async def reset(self, key: str) -> None:
        self._windows.pop(key, None)


class RedisFixedWindowRateLimiter:
    """
    Redis-backed fixed-window counter.

    INCR creates the key; the TTL is set only when the window opens so
    later hits do not extend it. Redis failures degrade to no limiting.
    """

    def __init__(
        self,
        redis_client: Any,
        window_seconds: int,
        prefix: str = "rate_limit",
    ) -> None:
        """
        Initialize limiter.

        Args:
            redis_client: redis.asyncio client
            window_seconds: Window length
            prefix: Key namespace
        """
        self.redis_client = redis_client
        self.window_seconds = window_seconds
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def hit(self, key: str) -> int:
        redis_key = self._key(key)
        try:
            count = await self.redis_client.incr(redis_key)
            if count == 1:
                await self.redis_client.expire(redis_key, self.window_seconds)
            return int(count)
        except (RedisError, ConnectionError, TimeoutError) as e:
            logger.warning(
                f"Redis error recording hit for {redis_key}: "
                f"{type(e).__name__}: {e}. Continuing without rate limiting."
            )
            return 0

    async def get_count(self, key: str) -> int:
        redis_key = self._key(key)
        try:
            value = await self.redis_client.get(redis_key)
            return int(value) if value else 0
        except (RedisError, ConnectionError, TimeoutError) as e:
            logger.warning(
                f"Redis error reading {redis_key}: {type(e).__name__}: {e}. "
                "Continuing without rate limiting."
            )
            return 0
        except ValueError:
            logger.error(f"Invalid counter value in Redis for {redis_key}")
            return 0

    async def reset(self, key: str) -> None:
        redis_key = self._key(key)
        try:
            await self.redis_client.delete(redis_key)
        except (RedisError, ConnectionError, TimeoutError) as e:
            logger.warning(
                f"Redis error clearing {redis_key}: {type(e).__name__}: {e}"
            )
