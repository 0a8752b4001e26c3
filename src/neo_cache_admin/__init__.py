"""Neo-Cache-Admin - Administrative and bulk operations for the Redis cache.

Enumerate keys by prefix, aggregate their values, delete them in bulk
with per-key failure isolation and flush the whole server.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

# Configuration
from .config import (
    CacheAdminSettings,
    LoggingConfig,
    get_settings,
)

from .core.exceptions import (
    # Base Exception
    NeoCacheAdminError,

    # Cache Exceptions
    CacheError,
    CacheConnectionError,
    CacheEnumerationError,
    CacheKeyInvalid,
    CacheTimeout,
    DeserializationError,
)

from .core.value_objects import (
    KeyPrefix,
    SearchPattern,
    Deadline,
    build_prefix,
    ensure_wildcard,
)

from .core.events import AdminEvent

from .application import (
    BulkDeleteReport,
    DeleteOutcome,
    CacheServerUtil,
    create_cache_server_util,
)

__all__ = [
    "__version__",

    # Configuration
    "CacheAdminSettings",
    "LoggingConfig",
    "get_settings",

    # Exceptions
    "NeoCacheAdminError",
    "CacheError",
    "CacheConnectionError",
    "CacheEnumerationError",
    "CacheKeyInvalid",
    "CacheTimeout",
    "DeserializationError",

    # Value Objects
    "KeyPrefix",
    "SearchPattern",
    "Deadline",
    "build_prefix",
    "ensure_wildcard",

    # Events
    "AdminEvent",

    # Service
    "BulkDeleteReport",
    "DeleteOutcome",
    "CacheServerUtil",
    "create_cache_server_util",
]
