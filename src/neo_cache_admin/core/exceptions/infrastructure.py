"""Infrastructure-specific exceptions for neo-cache-admin.

This module defines exceptions raised when the cache server itself
cannot be reached or stops answering in the middle of an operation.
"""

from typing import Optional

from .base import NeoCacheAdminError


class CacheError(NeoCacheAdminError):
    """Base class for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """Raised when a server handle cannot be obtained."""
    pass


class CacheEnumerationError(CacheError):
    """Raised when a cursor scan breaks mid-stream."""

    def __init__(self, pattern: str, original_error: Optional[Exception] = None):
        self.pattern = pattern
        self.original_error = original_error
        message = f"Key scan failed for pattern '{pattern}'"
        if original_error is not None:
            message += f": {original_error}"
        super().__init__(
            message,
            error_code="CACHE_ENUMERATION_FAILED",
            details={"pattern": pattern},
        )
