"""Configuration for neo-cache-admin."""

from .logging_config import LoggingConfig, LogFormat, LogLevel, LogVerbosity, setup_logging
from .settings import CacheAdminSettings, get_settings

__all__ = [
    "LoggingConfig",
    "LogFormat",
    "LogLevel",
    "LogVerbosity",
    "setup_logging",
    "CacheAdminSettings",
    "get_settings",
]
