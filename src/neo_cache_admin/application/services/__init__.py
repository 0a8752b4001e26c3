"""Cache admin services."""

from .server_util import CacheServerUtil, create_cache_server_util

__all__ = [
    "CacheServerUtil",
    "create_cache_server_util",
]
