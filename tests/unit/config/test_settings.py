"""Tests for cache admin settings."""

import pytest
from pydantic import ValidationError

from neo_cache_admin.config.settings import CacheAdminSettings, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "REDIS_URL",
        "NEO_CACHE_REDIS_URL",
        "NEO_CACHE_REDIS_POOL_SIZE",
        "NEO_CACHE_REDIS_POOL_TIMEOUT_SECONDS",
        "NEO_CACHE_SCAN_COUNT",
        "NEO_CACHE_MAX_CONCURRENCY",
        "NEO_CACHE_OPERATION_TIMEOUT_SECONDS",
        "NEO_CACHE_FLUSH_ASYNCHRONOUS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestCacheAdminSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self, clean_env):
        settings = CacheAdminSettings(_env_file=None)

        assert settings.redis_url is None
        assert not settings.is_redis_configured
        assert settings.redis_url_string() is None
        assert settings.redis_pool_size == 10
        assert settings.redis_pool_timeout_seconds == 20.0
        assert settings.scan_count == 250
        assert settings.max_concurrency == 1
        assert settings.operation_timeout_seconds is None
        assert settings.flush_timeout_seconds == 30.0
        assert settings.flush_asynchronous is False

    def test_prefixed_environment(self, clean_env):
        clean_env.setenv("NEO_CACHE_REDIS_URL", "redis://cache:6379/1")
        clean_env.setenv("NEO_CACHE_SCAN_COUNT", "1000")
        clean_env.setenv("NEO_CACHE_MAX_CONCURRENCY", "8")
        clean_env.setenv("NEO_CACHE_OPERATION_TIMEOUT_SECONDS", "2.5")
        clean_env.setenv("NEO_CACHE_FLUSH_ASYNCHRONOUS", "true")

        settings = CacheAdminSettings(_env_file=None)

        assert settings.is_redis_configured
        assert settings.redis_url_string() == "redis://cache:6379/1"
        assert settings.scan_count == 1000
        assert settings.max_concurrency == 8
        assert settings.operation_timeout_seconds == 2.5
        assert settings.flush_asynchronous is True

    def test_plain_redis_url_fallback(self, clean_env):
        clean_env.setenv("REDIS_URL", "redis://fallback:6379/0")

        settings = CacheAdminSettings(_env_file=None)

        assert settings.redis_url_string() == "redis://fallback:6379/0"

    def test_field_name_override(self, clean_env):
        settings = CacheAdminSettings(redis_url="redis://localhost:6379/0", _env_file=None)

        assert settings.redis_url.host == "localhost"

    def test_invalid_values_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            CacheAdminSettings(max_concurrency=0, _env_file=None)
        with pytest.raises(ValidationError):
            CacheAdminSettings(redis_url="http://not-redis", _env_file=None)

    def test_concurrency_beyond_pool_rejected(self, clean_env):
        with pytest.raises(ValidationError, match="must not exceed redis_pool_size"):
            CacheAdminSettings(max_concurrency=11, _env_file=None)

        clean_env.setenv("NEO_CACHE_REDIS_POOL_SIZE", "4")
        clean_env.setenv("NEO_CACHE_MAX_CONCURRENCY", "5")
        with pytest.raises(ValidationError):
            CacheAdminSettings(_env_file=None)

    def test_concurrency_equal_to_pool_accepted(self, clean_env):
        settings = CacheAdminSettings(redis_pool_size=4, max_concurrency=4, _env_file=None)

        assert settings.max_concurrency == settings.redis_pool_size

    def test_get_settings_is_cached(self, clean_env):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
