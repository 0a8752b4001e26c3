"""Cache server util service.

ONLY orchestration - the single public surface of the admin layer,
composing the key queries and bulk commands and turning per-call
timeouts into deadlines.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Type

from ...config.settings import CacheAdminSettings, get_settings
from ...core.protocols.store_server_client import StoreServerClient
from ...core.protocols.store_value_client import StoreValueClient
from ...core.value_objects.deadline import Deadline
from ...infrastructure.clients.redis_server_client import RedisServerClient
from ...infrastructure.clients.redis_value_client import RedisValueClient
from ..commands.delete_by_prefix import BulkDeleteReport, DeleteByPrefixCommand
from ..commands.flush_all import FlushAllCommand
from ..queries.aggregate_values import AggregateValuesQuery
from ..queries.enumerate_keys import KeyEnumerator
from ..queries.list_keys import ListKeysQuery

logger = logging.getLogger(__name__)


class CacheServerUtil:
    """Administrative and bulk operations over a cache server.

    ``None`` results mean the keys could not be enumerated (store
    unavailable); empty results mean nothing matched. ``timeout`` is in
    seconds and covers the whole call; when omitted the configured
    operation timeout applies.
    """

    def __init__(
        self,
        server_client: StoreServerClient,
        value_client: StoreValueClient,
        settings: Optional[CacheAdminSettings] = None,
        owns_clients: bool = False
    ):
        """Initialize cache server util.

        Args:
            server_client: Store server client (enumeration, flush)
            value_client: Store value client (per-key get/delete)
            settings: Cache admin settings (cached settings if None)
            owns_clients: Close the server client in ``aclose()``
        """
        self._settings = settings or get_settings()
        self._server_client = server_client
        self._value_client = value_client
        self._owns_clients = owns_clients

        self._enumerator = KeyEnumerator(server_client, scan_count=self._settings.scan_count)
        self._list_keys = ListKeysQuery(self._enumerator)
        self._aggregate = AggregateValuesQuery(
            self._list_keys, value_client, max_concurrency=self._settings.max_concurrency
        )
        self._delete = DeleteByPrefixCommand(
            self._list_keys, value_client, max_concurrency=self._settings.max_concurrency
        )
        self._flush = FlushAllCommand(server_client, asynchronous=self._settings.flush_asynchronous)

    @property
    def settings(self) -> CacheAdminSettings:
        return self._settings

    def _deadline(self, timeout: Optional[float], default: Optional[float]) -> Deadline:
        return Deadline.after(timeout if timeout is not None else default)

    def _operation_deadline(self, timeout: Optional[float]) -> Deadline:
        return self._deadline(timeout, self._settings.operation_timeout_seconds)

    async def enumerate_keys(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        timeout: Optional[float] = None
    ) -> Optional[AsyncIterator[str]]:
        """Lazily enumerate keys starting with the prefix.

        The returned iterator is single-pass and keeps honouring the
        timeout while it is consumed.
        """
        return await self._enumerator.enumerate_by_prefix(
            prefix, sub_prefix, deadline=self._operation_deadline(timeout)
        )

    async def list_keys(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        timeout: Optional[float] = None
    ) -> Optional[List[str]]:
        """List all keys starting with the prefix, in scan order."""
        return await self._list_keys.execute(
            prefix, sub_prefix, deadline=self._operation_deadline(timeout)
        )

    async def get_values(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        value_type: Optional[Type[Any]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Dict[str, Any]]:
        """Get deserialized values of all keys starting with the prefix.

        Keys whose value is missing or cannot be deserialized as
        ``value_type`` are omitted.
        """
        return await self._aggregate.values(
            prefix, sub_prefix, value_type=value_type, deadline=self._operation_deadline(timeout)
        )

    async def get_raw_values(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        timeout: Optional[float] = None
    ) -> Optional[Dict[str, str]]:
        """Get raw string values of all keys starting with the prefix."""
        return await self._aggregate.raw_strings(
            prefix, sub_prefix, deadline=self._operation_deadline(timeout)
        )

    async def get_hash_field_values(
        self,
        prefix: str,
        field: str,
        *,
        sub_prefix: Optional[str] = None,
        value_type: Optional[Type[Any]] = None,
        timeout: Optional[float] = None
    ) -> Optional[Dict[str, Any]]:
        """Get one hash field of all keys starting with the prefix."""
        return await self._aggregate.hash_field(
            prefix,
            field,
            sub_prefix=sub_prefix,
            value_type=value_type,
            deadline=self._operation_deadline(timeout),
        )

    async def delete_by_prefix(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        fire_and_forget: bool = False,
        timeout: Optional[float] = None
    ) -> BulkDeleteReport:
        """Delete all keys starting with the prefix.

        Per-key failures are logged and reported, never raised.
        """
        return await self._delete.execute(
            prefix,
            sub_prefix,
            fire_and_forget=fire_and_forget,
            deadline=self._operation_deadline(timeout),
        )

    async def flush_all(self, *, timeout: Optional[float] = None) -> bool:
        """Flush every key on the server. Failures are logged, not raised."""
        return await self._flush.execute(
            deadline=self._deadline(timeout, self._settings.flush_timeout_seconds)
        )

    async def aclose(self) -> None:
        """Wait for dispatched deletes and close owned clients."""
        drain = getattr(self._value_client, "drain", None)
        if drain is not None:
            await drain()

        if self._owns_clients:
            await self._server_client.close()
            logger.debug("Closed cache server util clients")

    async def __aenter__(self) -> "CacheServerUtil":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def create_cache_server_util(
    settings: Optional[CacheAdminSettings] = None,
    *,
    server_client: Optional[StoreServerClient] = None,
    value_client: Optional[StoreValueClient] = None
) -> CacheServerUtil:
    """Create cache server util with Redis-backed collaborators.

    Clients passed in are borrowed; clients created here are owned and
    closed by ``aclose()``.

    Args:
        settings: Cache admin settings (cached settings if None)
        server_client: Store server client to use instead of Redis
        value_client: Store value client to use instead of Redis

    Returns:
        Configured CacheServerUtil instance
    """
    settings = settings or get_settings()
    owns_clients = server_client is None

    if server_client is None:
        server_client = RedisServerClient.from_settings(settings)

    if value_client is None:
        if not isinstance(server_client, RedisServerClient):
            raise ValueError("value_client is required with a non-Redis server_client")
        value_client = RedisValueClient(server_client)

    return CacheServerUtil(
        server_client=server_client,
        value_client=value_client,
        settings=settings,
        owns_clients=owns_clients,
    )
