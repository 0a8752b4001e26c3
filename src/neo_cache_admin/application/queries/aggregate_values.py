"""Aggregate values query.

ONLY value aggregation - fetches every key under a prefix and builds a
key to value mapping, omitting keys whose value is gone or unreadable.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from ...core.exceptions.cache_timeout import CacheTimeout
from ...core.protocols.store_value_client import StoreValueClient
from ...core.value_objects.deadline import Deadline
from ...core.value_objects.key_prefix import build_prefix
from ...core.value_objects.search_pattern import SearchPattern
from .list_keys import ListKeysQuery

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Awaitable[Optional[Any]]]


class AggregateValuesQuery:
    """Query to collect the values of every key under a prefix.

    Handles:
    - Typed values (deserialized by the value client)
    - Raw string values
    - One field of hash values

    Enumeration and fetch are not transactional: a key that expires in
    between simply does not appear in the result.
    """

    def __init__(
        self,
        list_query: ListKeysQuery,
        value_client: StoreValueClient,
        max_concurrency: int = 1
    ):
        """Initialize aggregate values query.

        Args:
            list_query: Key listing query
            value_client: Store value client for per-key fetches
            max_concurrency: Maximum in-flight fetches (1 = sequential)
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self._list_query = list_query
        self._value_client = value_client
        self._max_concurrency = max_concurrency

    async def values(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        value_type: Optional[Type[Any]] = None,
        deadline: Optional[Deadline] = None
    ) -> Optional[Dict[str, Any]]:
        """Collect deserialized values keyed by cache key."""
        return await self._aggregate(
            prefix,
            sub_prefix,
            lambda key: self._value_client.get(key, value_type),
            deadline,
        )

    async def raw_strings(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        deadline: Optional[Deadline] = None
    ) -> Optional[Dict[str, str]]:
        """Collect raw string values keyed by cache key."""
        return await self._aggregate(prefix, sub_prefix, self._value_client.get_string, deadline)

    async def hash_field(
        self,
        prefix: str,
        field: str,
        *,
        sub_prefix: Optional[str] = None,
        value_type: Optional[Type[Any]] = None,
        deadline: Optional[Deadline] = None
    ) -> Optional[Dict[str, Any]]:
        """Collect one deserialized hash field per key, keyed by cache key."""
        return await self._aggregate(
            prefix,
            sub_prefix,
            lambda key: self._value_client.get_hash_field(key, field, value_type),
            deadline,
        )

    def _fans_out(self) -> bool:
        return self._max_concurrency > 1 and getattr(self._value_client, "concurrency_safe", False)

    async def _aggregate(
        self,
        prefix: str,
        sub_prefix: Optional[str],
        fetch: Fetch,
        deadline: Optional[Deadline]
    ) -> Optional[Dict[str, Any]]:
        deadline = deadline or Deadline.none()
        keys = await self._list_query.execute(prefix, sub_prefix, deadline=deadline)

        if keys is None:
            return None

        if len(keys) == 0:
            return {}

        pattern = SearchPattern.from_prefix(build_prefix(prefix, sub_prefix))
        if self._fans_out():
            fetching = self._fetch_concurrently(keys, fetch)
        else:
            fetching = self._fetch_sequentially(keys, fetch)

        result = await deadline.wait(
            fetching,
            lambda: CacheTimeout.aggregation(pattern.value, deadline.timeout_seconds),
        )
        if len(result) < len(keys):
            logger.debug(f"Omitted {len(keys) - len(result)} of {len(keys)} keys matching {pattern}")
        return result

    async def _fetch_sequentially(self, keys: List[str], fetch: Fetch) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key in keys:
            value = await fetch(key)
            if value is not None:
                result[key] = value
        return result

    async def _fetch_concurrently(self, keys: List[str], fetch: Fetch) -> Dict[str, Any]:
        semaphore = asyncio.Semaphore(self._max_concurrency)
        values: Dict[str, Any] = {}

        async def fetch_one(key: str) -> None:
            async with semaphore:
                value = await fetch(key)
            if value is not None:
                values[key] = value

        try:
            async with asyncio.TaskGroup() as group:
                for key in keys:
                    group.create_task(fetch_one(key))
        except ExceptionGroup as eg:
            # Surface the first fetch failure the way the sequential path does
            raise eg.exceptions[0]

        # Re-key in enumeration order
        return {key: values[key] for key in keys if key in values}
