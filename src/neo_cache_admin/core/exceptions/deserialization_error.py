"""Deserialization error exception.

ONLY deserialization errors - exception for cache value deserialization
failures with error context.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Dict, Optional

from .infrastructure import CacheError


class DeserializationError(CacheError):
    """Cache deserialization error.

    Raised when stored bytes cannot be turned back into the requested
    Python type.
    """

    def __init__(
        self,
        message: str,
        data: Optional[bytes] = None,
        serializer_type: Optional[str] = None,
        original_error: Optional[Exception] = None,
        target_type: Optional[str] = None
    ):
        """Initialize deserialization error.

        Args:
            message: Error description
            data: Serialized data that failed to deserialize
            serializer_type: Type of serializer that failed
            original_error: Original underlying exception
            target_type: Name of the type the data was validated against
        """
        super().__init__(message, error_code="CACHE_DESERIALIZATION_ERROR")
        self.data = data
        self.serializer_type = serializer_type
        self.original_error = original_error
        self.target_type = target_type

    def get_error_details(self) -> Dict[str, Any]:
        """Get detailed error information."""
        details: Dict[str, Any] = {
            "error_code": self.error_code,
            "message": str(self),
            "serializer_type": self.serializer_type,
            "target_type": self.target_type,
        }

        if self.original_error:
            details["original_error"] = {
                "type": type(self.original_error).__name__,
                "message": str(self.original_error)
            }

        if self.data is not None:
            details["data_size"] = len(self.data)
            details["data_preview"] = repr(self.data[:50])

        return details
