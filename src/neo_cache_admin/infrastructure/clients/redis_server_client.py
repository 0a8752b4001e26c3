"""Redis server client.

ONLY connection management - lazily builds the blocking redis.asyncio
connection pool, checks it with PING and hands out server handles.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from redis.asyncio import BlockingConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ...config.settings import CacheAdminSettings
from ...core.exceptions.infrastructure import CacheConnectionError
from .redis_server_handle import RedisServerHandle

logger = logging.getLogger(__name__)


class RedisServerClient:
    """Manages the Redis connection and hands out server handles.

    ``connect()`` returns None when Redis is not configured or not
    reachable, so callers can tell "could not enumerate" apart from
    "nothing matched". Each call retries a failed connection.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        pool_size: int = 10,
        connect_timeout_seconds: float = 5.0,
        pool_timeout_seconds: float = 20.0,
        scan_count: int = 250,
        redis_client: Optional[Redis] = None,
        pool_options: Optional[Dict[str, Any]] = None
    ):
        """Initialize Redis server client.

        Args:
            redis_url: Redis connection URL
            pool_size: Maximum pooled connections
            connect_timeout_seconds: Socket connect timeout
            pool_timeout_seconds: How long a command waits for a free
                pooled connection before failing
            scan_count: Default COUNT hint for SCAN pages
            redis_client: Already connected client to borrow instead of
                building a pool (never closed by this class)
            pool_options: Extra keyword arguments for the connection pool
        """
        self.redis_url = redis_url
        self.pool_size = pool_size
        self.connect_timeout_seconds = connect_timeout_seconds
        self.pool_timeout_seconds = pool_timeout_seconds
        self.scan_count = scan_count
        self.is_available = redis_client is not None
        self.connection_attempted = redis_client is not None
        self._client: Optional[Redis] = redis_client
        self._pool: Optional[BlockingConnectionPool] = None
        self._pool_options = pool_options or {}
        self._owns_client = redis_client is None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: CacheAdminSettings) -> "RedisServerClient":
        """Create client from cache admin settings."""
        return cls(
            redis_url=settings.redis_url_string(),
            pool_size=settings.redis_pool_size,
            connect_timeout_seconds=settings.connect_timeout_seconds,
            pool_timeout_seconds=settings.redis_pool_timeout_seconds,
            scan_count=settings.scan_count,
        )

    async def connect(self) -> Optional[RedisServerHandle]:
        """Get a server handle, or None if Redis is unavailable."""
        client = await self.get_client()
        if client is None:
            return None
        return RedisServerHandle(client, scan_count=self.scan_count)

    async def get_client(self) -> Optional[Redis]:
        """Get the connected redis.asyncio client, creating it on first use."""
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is not None:
                return self._client

            if not self.redis_url:
                if not self.connection_attempted:
                    logger.info(
                        "Redis URL not configured (NEO_CACHE_REDIS_URL / REDIS_URL not set). "
                        "Cache admin operations will report the store as unavailable."
                    )
                self.connection_attempted = True
                return None

            self.connection_attempted = True
            try:
                logger.info("Creating Redis connection pool...")
                # Callers beyond pool_size wait for a connection instead of failing;
                # undecodable key bytes survive as lone surrogates
                self._pool = BlockingConnectionPool.from_url(
                    self.redis_url,
                    max_connections=self.pool_size,
                    timeout=self.pool_timeout_seconds,
                    socket_connect_timeout=self.connect_timeout_seconds,
                    health_check_interval=30,
                    encoding_errors="surrogateescape",
                    **self._pool_options
                )
                client = Redis(connection_pool=self._pool)
                await client.ping()

            except (RedisConnectionError, RedisTimeoutError, OSError) as e:
                logger.warning(f"Redis connection failed: {e}. Store is unavailable.")
                self.is_available = False
                await self._cleanup_failed_connection()
                return None

            except RedisError as e:
                self.is_available = False
                await self._cleanup_failed_connection()
                raise CacheConnectionError(
                    f"Redis connection setup failed: {e}",
                    details={"redis_url": self._safe_url()},
                ) from e

            logger.info("Redis connection established successfully")
            self._client = client
            self.is_available = True
            return self._client

    async def _cleanup_failed_connection(self) -> None:
        """Clean up failed connection attempts."""
        if self._pool is not None:
            await self._pool.disconnect()
        self._pool = None

    async def close(self) -> None:
        """Close Redis connection if this client created it."""
        if self._client is None or not self._owns_client:
            return
        await self._client.aclose()
        if self._pool is not None:
            await self._pool.disconnect()
        self._client = None
        self._pool = None
        self.is_available = False
        logger.info("Redis connection closed")

    def _safe_url(self) -> Optional[str]:
        if not self.redis_url or "@" not in self.redis_url:
            return self.redis_url
        scheme, _, rest = self.redis_url.partition("://")
        return f"{scheme}://***@{rest.split('@', 1)[1]}"
