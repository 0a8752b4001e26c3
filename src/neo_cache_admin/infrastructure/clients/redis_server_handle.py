"""Redis server handle.

ONLY server-level commands - cursor scan and flush on one borrowed
redis.asyncio client.

Following maximum separation architecture - one file = one purpose.
"""

from typing import AsyncIterator, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ...core.exceptions.infrastructure import CacheConnectionError, CacheEnumerationError


class RedisServerHandle:
    """Server handle backed by a redis.asyncio client.

    The handle never closes the client; the owning RedisServerClient does.
    """

    def __init__(self, redis_client: Redis, scan_count: int = 250):
        """Initialize Redis server handle.

        Args:
            redis_client: Connected redis.asyncio client
            scan_count: Default COUNT hint for SCAN pages
        """
        self._redis = redis_client
        self._scan_count = scan_count

    async def scan_keys(self, pattern: str, count: Optional[int] = None) -> AsyncIterator[str]:
        """Lazily scan keys matching pattern with SCAN cursor iteration.

        Keys that are not valid UTF-8 keep their undecodable bytes as lone
        surrogates, so they encode back to the same key on the way out.
        """
        try:
            async for key in self._redis.scan_iter(match=pattern, count=count or self._scan_count):
                yield key.decode("utf-8", errors="surrogateescape") if isinstance(key, bytes) else key
        except RedisError as e:
            raise CacheEnumerationError(pattern, e) from e

    async def flush_all(self, asynchronous: bool = False) -> None:
        """Flush all databases on the server."""
        try:
            await self._redis.flushall(asynchronous=asynchronous)
        except RedisError as e:
            raise CacheConnectionError(
                f"FLUSHALL failed: {e}",
                error_code="CACHE_FLUSH_FAILED",
                details={"asynchronous": asynchronous},
            ) from e
