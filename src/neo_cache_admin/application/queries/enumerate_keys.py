"""Enumerate keys query.

ONLY key enumeration - turns a prefix into a single-wildcard search
pattern and drives the server's cursor scan lazily.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import AsyncIterator, Optional

from ...core.exceptions.cache_timeout import CacheTimeout
from ...core.protocols.store_server_client import ServerHandle, StoreServerClient
from ...core.value_objects.deadline import Deadline
from ...core.value_objects.key_prefix import build_prefix
from ...core.value_objects.search_pattern import SearchPattern

logger = logging.getLogger(__name__)


class KeyEnumerator:
    """Lazy prefix enumeration over the server's cursor scan.

    Every call builds a fresh, single-pass key sequence. Connection setup
    failures and mid-scan failures propagate to the caller; only an
    unavailable store is reported as None.
    """

    def __init__(self, server_client: StoreServerClient, scan_count: Optional[int] = None):
        """Initialize key enumerator.

        Args:
            server_client: Store server client providing handles
            scan_count: COUNT hint per SCAN page (handle default if None)
        """
        self._server_client = server_client
        self._scan_count = scan_count

    async def enumerate_by_prefix(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        deadline: Optional[Deadline] = None
    ) -> Optional[AsyncIterator[str]]:
        """Get a lazy sequence of keys starting with the prefix.

        Args:
            prefix: Namespace or fully built prefix (a trailing ``*`` is tolerated)
            sub_prefix: Optional sub-segment joined to the namespace
            deadline: Bound for connection and every cursor advance

        Returns:
            Async iterator of matching keys, or None if the store is unavailable
        """
        pattern = SearchPattern.from_prefix(build_prefix(prefix, sub_prefix))
        deadline = deadline or Deadline.none()

        handle = await deadline.wait(
            self._server_client.connect(),
            lambda: CacheTimeout.connection(deadline.timeout_seconds),
        )
        if handle is None:
            logger.warning(f"Store unavailable, cannot enumerate keys matching {pattern}")
            return None

        return self._scan(handle, pattern, deadline)

    async def _scan(
        self,
        handle: ServerHandle,
        pattern: SearchPattern,
        deadline: Deadline
    ) -> AsyncIterator[str]:
        iterator = handle.scan_keys(pattern.value, self._scan_count).__aiter__()
        produced = 0
        logger.debug(f"Scanning keys matching {pattern}")

        try:
            while True:
                try:
                    key = await deadline.wait(
                        anext(iterator),
                        lambda: CacheTimeout.enumeration(pattern.value, deadline.timeout_seconds),
                    )
                except StopAsyncIteration:
                    break
                produced += 1
                yield key
        finally:
            close = getattr(iterator, "aclose", None)
            if close is not None:
                await close()
            logger.debug(f"Scan of {pattern} produced {produced} keys")
