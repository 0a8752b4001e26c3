"""Redis value client.

ONLY per-key operations - GET / HGET with JSON deserialization and DEL,
optionally dispatched fire-and-forget.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Optional, Set, Type, TypeVar

from redis.asyncio import Redis
from redis.exceptions import RedisError, ResponseError

from ...core.exceptions.deserialization_error import DeserializationError
from ...core.exceptions.infrastructure import CacheConnectionError
from ..serializers.json_serializer import JSONCacheSerializer
from .redis_server_client import RedisServerClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RedisValueClient:
    """Value client backed by the server client's connection pool.

    A pooled redis.asyncio client serves concurrent commands, so bulk
    operations may fan out over this client.

    A key holding a different Redis type than the command expects reads
    as missing. Any other command failure raises CacheConnectionError.
    """

    concurrency_safe = True

    def __init__(
        self,
        connection: RedisServerClient,
        serializer: Optional[JSONCacheSerializer] = None,
        max_pending: Optional[int] = None
    ):
        """Initialize Redis value client.

        Args:
            connection: Server client owning the connection pool
            serializer: Value serializer (JSON by default)
            max_pending: Maximum fire-and-forget deletes in flight; further
                dispatches wait for a slot (defaults to the pool size)
        """
        self._connection = connection
        self._serializer = serializer or JSONCacheSerializer()
        self._pending: Set[asyncio.Task] = set()
        self._dispatch_slots = asyncio.Semaphore(max_pending or connection.pool_size)

    async def _require_client(self) -> Redis:
        client = await self._connection.get_client()
        if client is None:
            raise CacheConnectionError("Redis is not available", error_code="CACHE_UNAVAILABLE")
        return client

    async def _execute(self, key: str, command: Awaitable[T]) -> Optional[T]:
        try:
            return await command
        except ResponseError as e:
            if str(e).startswith("WRONGTYPE"):
                logger.debug(f"Skipping {key!r} holding another value type: {e}")
                return None
            raise CacheConnectionError(
                f"Redis command on {key!r} failed: {e}",
                error_code="CACHE_COMMAND_FAILED",
                details={"key": key},
            ) from e
        except RedisError as e:
            raise CacheConnectionError(
                f"Redis command on {key!r} failed: {e}",
                error_code="CACHE_COMMAND_FAILED",
                details={"key": key},
            ) from e

    def _deserialize(self, key: str, data: Any, value_type: Optional[Type[Any]]) -> Optional[Any]:
        try:
            return self._serializer.deserialize(data, value_type)
        except DeserializationError as e:
            logger.debug(f"Skipping value of {key!r} that failed to deserialize: {e}")
            return None

    async def get(self, key: str, value_type: Optional[Type[Any]] = None) -> Optional[Any]:
        """Get and deserialize a value; None when missing or undeserializable."""
        client = await self._require_client()
        data = await self._execute(key, client.get(key))
        if data is None:
            return None
        return self._deserialize(key, data, value_type)

    async def get_string(self, key: str) -> Optional[str]:
        """Get a raw string value."""
        client = await self._require_client()
        data = await self._execute(key, client.get(key))
        if data is None:
            return None
        return data.decode("utf-8", errors="replace") if isinstance(data, bytes) else str(data)

    async def get_hash_field(
        self,
        key: str,
        field: str,
        value_type: Optional[Type[Any]] = None
    ) -> Optional[Any]:
        """Get and deserialize one hash field; None when missing or undeserializable."""
        client = await self._require_client()
        data = await self._execute(key, client.hget(key, field))
        if data is None:
            return None
        return self._deserialize(key, data, value_type)

    async def delete(self, key: str, fire_and_forget: bool = False) -> None:
        """Delete a key, optionally without waiting for the reply.

        A fire-and-forget delete returns once the DEL is dispatched; its
        failure is logged, not raised.
        """
        client = await self._require_client()
        if not fire_and_forget:
            await self._execute(key, client.delete(key))
            return

        await self._dispatch_slots.acquire()
        task = asyncio.create_task(self._execute(key, client.delete(key)))
        self._pending.add(task)
        task.add_done_callback(partial(self._on_dispatch_done, key))

    def _on_dispatch_done(self, key: str, task: asyncio.Task) -> None:
        self._pending.discard(task)
        self._dispatch_slots.release()
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Fire-and-forget delete of {key!r} failed", exc_info=error)

    @property
    def pending_count(self) -> int:
        """Number of fire-and-forget deletes still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for outstanding fire-and-forget deletes."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
