"""Pytest configuration and fixtures for neo-cache-admin tests."""

import asyncio
import logging
from fnmatch import fnmatchcase
from typing import Any, AsyncIterator, Dict, List, Optional, Set, Type

import pytest

from neo_cache_admin.config.settings import CacheAdminSettings
from neo_cache_admin.core.exceptions import CacheEnumerationError, CacheError


class InMemoryServerHandle:
    """Server handle over a dict, scanning in pages like SCAN does."""

    def __init__(self, server: "InMemoryServerClient"):
        self._server = server

    async def scan_keys(self, pattern: str, count: Optional[int] = None) -> AsyncIterator[str]:
        server = self._server
        server.scan_patterns.append(pattern)
        page_size = count or server.page_size
        matched = [key for key in list(server.data) if fnmatchcase(key, pattern)]

        for index, key in enumerate(matched):
            if index % page_size == 0:
                # Each page is one server round trip
                await asyncio.sleep(server.scan_delay)
            if server.fail_scan_after is not None and index >= server.fail_scan_after:
                raise CacheEnumerationError(pattern, ConnectionResetError("connection lost"))
            yield key

    async def flush_all(self, asynchronous: bool = False) -> None:
        server = self._server
        server.flush_calls.append(asynchronous)
        await asyncio.sleep(server.flush_delay)
        if server.flush_error is not None:
            raise server.flush_error
        server.data.clear()


class InMemoryServerClient:
    """Store server client fake backed by a shared dict."""

    def __init__(self, data: Dict[str, Any]):
        self.data = data
        self.available = True
        self.connect_error: Optional[Exception] = None
        self.connect_delay = 0.0
        self.page_size = 2
        self.scan_delay = 0.0
        self.fail_scan_after: Optional[int] = None
        self.flush_delay = 0.0
        self.flush_error: Optional[Exception] = None
        self.scan_patterns: List[str] = []
        self.flush_calls: List[bool] = []
        self.closed = False

    async def connect(self) -> Optional[InMemoryServerHandle]:
        await asyncio.sleep(self.connect_delay)
        if self.connect_error is not None:
            raise self.connect_error
        if not self.available:
            return None
        return InMemoryServerHandle(self)

    async def close(self) -> None:
        self.closed = True


class InMemoryValueClient:
    """Store value client fake with per-key failure injection.

    Hash values are dicts; everything else is returned as stored.
    """

    def __init__(self, data: Dict[str, Any]):
        self.data = data
        self.concurrency_safe = True
        self.failing_keys: Set[str] = set()
        self.delay = 0.0
        self.calls: List[str] = []
        self.deleted: List[str] = []
        self.fire_and_forget_flags: List[bool] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, key: str) -> None:
        self.calls.append(key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if key in self.failing_keys:
            raise CacheError(f"injected failure for {key}")

    async def get(self, key: str, value_type: Optional[Type[Any]] = None) -> Optional[Any]:
        await self._enter(key)
        value = self.data.get(key)
        if isinstance(value, dict):
            return None
        return value

    async def get_string(self, key: str) -> Optional[str]:
        await self._enter(key)
        value = self.data.get(key)
        return value if isinstance(value, str) else None

    async def get_hash_field(
        self,
        key: str,
        field: str,
        value_type: Optional[Type[Any]] = None
    ) -> Optional[Any]:
        await self._enter(key)
        value = self.data.get(key)
        if not isinstance(value, dict):
            return None
        return value.get(field)

    async def delete(self, key: str, fire_and_forget: bool = False) -> None:
        self.fire_and_forget_flags.append(fire_and_forget)
        await self._enter(key)
        self.data.pop(key, None)
        self.deleted.append(key)


@pytest.fixture
def store_data():
    """Sample keyspace shared by the fake clients."""
    return {
        "user:1": "alice",
        "user:2": "bob",
        "user:3": "carol",
        "user:1:profile": {"name": "Alice", "email": "alice@example.com"},
        "user:2:profile": {"name": "Bob"},
        "session:abc": "token-abc",
        "session:def": "token-def",
    }


@pytest.fixture
def server_client(store_data):
    """In-memory store server client."""
    return InMemoryServerClient(store_data)


@pytest.fixture
def value_client(store_data):
    """In-memory store value client."""
    return InMemoryValueClient(store_data)


@pytest.fixture
def settings():
    """Settings without Redis configured."""
    return CacheAdminSettings(redis_url=None, _env_file=None)


@pytest.fixture
def admin_caplog(caplog):
    """caplog capturing every level of the package loggers."""
    caplog.set_level(logging.DEBUG, logger="neo_cache_admin")
    return caplog

