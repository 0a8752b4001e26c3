"""Store server client protocol.

ONLY server contract - connection acquisition, cursor-based key scan
and the flush command of the cache server.

Following maximum separation architecture - one file = one purpose.
"""

from typing import AsyncIterator, Optional
from typing_extensions import Protocol, runtime_checkable


@runtime_checkable
class ServerHandle(Protocol):
    """Handle to one cache server, borrowed for the duration of a call."""

    def scan_keys(self, pattern: str, count: Optional[int] = None) -> AsyncIterator[str]:
        """Lazily scan keys matching a glob pattern.

        Drives the server's SCAN cursor to completion, yielding keys page
        by page. Keys are decoded to ``str``.

        Raises:
            CacheEnumerationError: If the scan fails mid-stream
        """
        ...

    async def flush_all(self, asynchronous: bool = False) -> None:
        """Erase every key on every database of the server."""
        ...


@runtime_checkable
class StoreServerClient(Protocol):
    """Cache server client protocol.

    Owns the connection lifecycle. Callers only borrow the handle it
    returns and never close it.
    """

    async def connect(self) -> Optional[ServerHandle]:
        """Get a server handle.

        Returns None when the store is not configured or unreachable.

        Raises:
            CacheConnectionError: If connection setup fails unexpectedly
        """
        ...

    async def close(self) -> None:
        """Release the underlying connection pool."""
        ...
