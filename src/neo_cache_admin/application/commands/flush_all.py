"""Flush all command.

ONLY server flush - removes every key in every database of the server,
reporting the outcome through logs instead of raising.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import Optional

from ...core.events.admin_events import AdminEvent, emit
from ...core.exceptions.cache_timeout import CacheTimeout
from ...core.exceptions.infrastructure import CacheConnectionError
from ...core.protocols.store_server_client import StoreServerClient
from ...core.value_objects.deadline import Deadline

logger = logging.getLogger(__name__)


class FlushAllCommand:
    """Command to flush the whole server."""

    def __init__(
        self,
        server_client: StoreServerClient,
        asynchronous: bool = False
    ):
        """Initialize flush all command.

        Args:
            server_client: Store server client providing handles
            asynchronous: Ask the server to flush in the background (FLUSHALL ASYNC)
        """
        self._server_client = server_client
        self._asynchronous = asynchronous

    async def execute(self, *, deadline: Optional[Deadline] = None) -> bool:
        """Execute server flush.

        Never raises for store failures or deadline expiry; those are
        logged as FLUSH_ERROR. Cancellation propagates.

        Returns:
            True if the flush was acknowledged
        """
        deadline = deadline or Deadline.none()
        emit(logger, AdminEvent.FLUSHING)

        try:
            await deadline.wait(self._flush(), lambda: CacheTimeout.flush(deadline.timeout_seconds))
        except Exception as e:
            emit(logger, AdminEvent.FLUSH_ERROR, exc_info=e)
            return False

        emit(logger, AdminEvent.FLUSHED_OK)
        return True

    async def _flush(self) -> None:
        handle = await self._server_client.connect()
        if handle is None:
            raise CacheConnectionError("Redis is not available", error_code="CACHE_UNAVAILABLE")
        await handle.flush_all(asynchronous=self._asynchronous)
