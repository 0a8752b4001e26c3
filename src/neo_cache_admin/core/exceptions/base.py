"""Base exceptions for neo-cache-admin.

This module defines the base exception hierarchy for the neo-cache-admin
library. All library exceptions inherit from NeoCacheAdminError and carry
an error code plus structured details for logging and CLI output.
"""

from typing import Any, Dict, Optional


class NeoCacheAdminError(Exception):
    """Base exception for all neo-cache-admin errors.

    All exceptions in the library inherit from this base class and include
    structured error information for better debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
