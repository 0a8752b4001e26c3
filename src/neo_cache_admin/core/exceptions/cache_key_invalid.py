"""Cache key invalid exception.

ONLY key validation errors - raised when a namespace or sub-prefix
cannot be turned into a key prefix.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Optional


class CacheKeyInvalid(ValueError):
    """Invalid cache key prefix error."""

    def __init__(self, value: Any, reason: str, error_code: Optional[str] = None):
        self.value = value
        self.reason = reason
        self.error_code = error_code or "CACHE_KEY_INVALID"
        super().__init__(f"Invalid cache key prefix {value!r}: {reason}")

    @classmethod
    def missing_namespace(cls) -> "CacheKeyInvalid":
        """Create exception for a missing namespace."""
        return cls(None, "namespace is required", "CACHE_NAMESPACE_MISSING")

    @classmethod
    def wrong_type(cls, value: Any) -> "CacheKeyInvalid":
        """Create exception for a non-string prefix part."""
        return cls(
            value,
            f"expected str, got {type(value).__name__}",
            "CACHE_KEY_WRONG_TYPE",
        )
