"""Cache admin exceptions."""

from .base import NeoCacheAdminError
from .infrastructure import CacheError, CacheConnectionError, CacheEnumerationError
from .cache_key_invalid import CacheKeyInvalid
from .cache_timeout import CacheTimeout
from .deserialization_error import DeserializationError

__all__ = [
    "NeoCacheAdminError",
    "CacheError",
    "CacheConnectionError",
    "CacheEnumerationError",
    "CacheKeyInvalid",
    "CacheTimeout",
    "DeserializationError",
]
