"""Cache timeout exception.

ONLY timeout errors - exception raised when an administrative operation
runs past its deadline.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Optional


class CacheTimeout(TimeoutError):
    """Cache operation timeout error.

    Raised when a deadline expires while:
    - acquiring a server handle
    - advancing a key scan cursor
    - dispatching bulk deletes
    - waiting for a flush to complete
    """

    def __init__(
        self,
        operation: str,
        timeout_seconds: Optional[float],
        error_code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        """Initialize cache timeout error.

        Args:
            operation: The cache operation that timed out
            timeout_seconds: The configured timeout limit
            error_code: Optional machine-readable error code
            details: Optional additional error details
        """
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        self.error_code = error_code or "CACHE_TIMEOUT"
        self.details = details or {}

        message = f"Cache {operation} operation timed out"
        if timeout_seconds is not None:
            message += f" after {timeout_seconds}s"

        super().__init__(message)

    @classmethod
    def connection(cls, timeout_seconds: Optional[float]) -> "CacheTimeout":
        """Create timeout exception for handle acquisition."""
        return cls(
            operation="connect",
            timeout_seconds=timeout_seconds,
            error_code="CACHE_CONNECTION_TIMEOUT",
        )

    @classmethod
    def enumeration(cls, pattern: str, timeout_seconds: Optional[float]) -> "CacheTimeout":
        """Create timeout exception for a key scan."""
        return cls(
            operation="scan",
            timeout_seconds=timeout_seconds,
            error_code="CACHE_SCAN_TIMEOUT",
            details={"pattern": pattern},
        )

    @classmethod
    def aggregation(cls, pattern: str, timeout_seconds: Optional[float]) -> "CacheTimeout":
        """Create timeout exception for per-key value fetches."""
        return cls(
            operation="aggregate",
            timeout_seconds=timeout_seconds,
            error_code="CACHE_AGGREGATE_TIMEOUT",
            details={"pattern": pattern},
        )

    @classmethod
    def delete_batch(
        cls,
        pattern: str,
        attempted: int,
        total: int,
        timeout_seconds: Optional[float]
    ) -> "CacheTimeout":
        """Create timeout exception for a bulk delete."""
        return cls(
            operation="batch_delete",
            timeout_seconds=timeout_seconds,
            error_code="CACHE_BATCH_DELETE_TIMEOUT",
            details={"pattern": pattern, "attempted": attempted, "total": total},
        )

    @classmethod
    def flush(cls, timeout_seconds: Optional[float]) -> "CacheTimeout":
        """Create timeout exception for a server flush."""
        return cls(
            operation="flush",
            timeout_seconds=timeout_seconds,
            error_code="CACHE_FLUSH_TIMEOUT",
        )

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": "CacheTimeout",
            "error_code": self.error_code,
            "operation": self.operation,
            "timeout_seconds": self.timeout_seconds,
            "details": self.details,
        }
