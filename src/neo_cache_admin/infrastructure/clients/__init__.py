"""Redis-backed store clients."""

from .redis_server_client import RedisServerClient
from .redis_server_handle import RedisServerHandle
from .redis_value_client import RedisValueClient

__all__ = [
    "RedisServerClient",
    "RedisServerHandle",
    "RedisValueClient",
]
