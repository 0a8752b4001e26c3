"""
Settings for the cache admin layer.

Pydantic settings read from environment variables (``NEO_CACHE_`` prefix)
and an optional ``.env`` file.
"""
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, RedisDsn, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheAdminSettings(BaseSettings):
    """Cache admin settings."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )

    # Redis Connection
    redis_url: Optional[RedisDsn] = Field(
        default=None,
        validation_alias=AliasChoices("NEO_CACHE_REDIS_URL", "REDIS_URL"),
    )
    redis_pool_size: int = Field(default=10, ge=1)
    connect_timeout_seconds: float = Field(default=5.0, gt=0)
    redis_pool_timeout_seconds: float = Field(default=20.0, gt=0)  # wait for a free pooled connection

    # Scanning
    scan_count: int = Field(default=250, ge=1)  # SCAN COUNT hint, not a limit

    # Bulk Operations
    max_concurrency: int = Field(default=1, ge=1)
    operation_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    # Flush
    flush_timeout_seconds: float = Field(default=30.0, gt=0)
    flush_asynchronous: bool = False

    @model_validator(mode="after")
    def _concurrency_fits_pool(self) -> "CacheAdminSettings":
        # Every in-flight fetch or delete holds one pooled connection
        if self.max_concurrency > self.redis_pool_size:
            raise ValueError(
                f"max_concurrency ({self.max_concurrency}) must not exceed "
                f"redis_pool_size ({self.redis_pool_size})"
            )
        return self

    @property
    def is_redis_configured(self) -> bool:
        """Check if a Redis URL is set."""
        return self.redis_url is not None

    def redis_url_string(self) -> Optional[str]:
        """Redis URL as a plain string."""
        return str(self.redis_url) if self.redis_url is not None else None


@lru_cache()
def get_settings() -> CacheAdminSettings:
    """Get cached settings instance."""
    return CacheAdminSettings()
