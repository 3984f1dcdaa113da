"""
Distributed lock on Redis.

Keeps two workers from running the same job at once. Jobs guarded by it
must still be safe to run concurrently: the lock only avoids duplicate
work, the database guards correctness.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from loguru import logger
from redis.exceptions import RedisError

# Delete the key only if it still holds our token
RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class DistributedLock:
    """SET NX EX lock with token-checked release."""

    def __init__(self, redis_client: Any | None = None, prefix: str = "lock") -> None:
        """
        Initialize lock.

        Args:
            redis_client: redis.asyncio client, or None to run unguarded
            prefix: Key namespace
        """
        self.redis_client = redis_client
        self.prefix = prefix

    @asynccontextmanager
    async def lock(self, key: str, timeout: int = 60) -> AsyncIterator[bool]:
        """
        Try to acquire the lock for the duration of the block.

        Args:
            key: Lock name
            timeout: Seconds before the lock expires on its own

        Yields:
            True if the lock is held (or no Redis is configured),
            False if another holder has it
        """
        if self.redis_client is None:
            logger.debug(f"No Redis configured, running {key} without lock")
            yield True
            return

        redis_key = f"{self.prefix}:{key}"
        token = str(uuid4())

        try:
            acquired = bool(
                await self.redis_client.set(redis_key, token, nx=True, ex=timeout)
            )
        except (RedisError, ConnectionError, TimeoutError) as e:
            logger.warning(
                f"Redis error acquiring lock {redis_key}: {type(e).__name__}: {e}. "
                "Continuing without lock (degraded mode)."
            )
            yield True
            return

        if not acquired:
            logger.info(f"Lock {redis_key} is held elsewhere, skipping")
            yield False
            return

        try:
            yield True
        finally:
            try:
                await self.redis_client.eval(RELEASE_SCRIPT, 1, redis_key, token)
            except (RedisError, ConnectionError, TimeoutError) as e:
                logger.warning(
                    f"Redis error releasing lock {redis_key}: {e}. "
                    "Lock will expire on its own."
                )
