"""End-to-end tests against an in-process fake Redis server.

The Redis clients run unmodified; only the socket is replaced by
fakeredis, so pooling, SCAN paging and type errors behave like a real
server.
"""

import logging

import pytest
import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeConnection

from neo_cache_admin.application.services import create_cache_server_util
from neo_cache_admin.config.settings import CacheAdminSettings
from neo_cache_admin.infrastructure.clients import RedisServerClient
from neo_cache_admin.infrastructure.serializers import JSONCacheSerializer


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def redis_settings():
    """Deliberately small pool so bulk operations contend for connections."""
    return CacheAdminSettings(
        redis_url="redis://fake:6379/0",
        redis_pool_size=2,
        redis_pool_timeout_seconds=5.0,
        max_concurrency=2,
        scan_count=3,
        _env_file=None,
    )


@pytest_asyncio.fixture
async def redis_server_client(fake_server, redis_settings):
    client = RedisServerClient(
        redis_url=redis_settings.redis_url_string(),
        pool_size=redis_settings.redis_pool_size,
        pool_timeout_seconds=redis_settings.redis_pool_timeout_seconds,
        scan_count=redis_settings.scan_count,
        pool_options={"connection_class": FakeConnection, "server": fake_server},
    )
    yield client
    await client.close()


@pytest_asyncio.fixture
async def redis(redis_server_client):
    """Raw client for seeding and inspecting the fake server."""
    return await redis_server_client.get_client()


@pytest.fixture
def util(redis_server_client, redis_settings):
    return create_cache_server_util(redis_settings, server_client=redis_server_client)


@pytest_asyncio.fixture
async def orders(redis):
    """A JSON value, a hash and a value that is not JSON under one prefix."""
    serializer = JSONCacheSerializer()
    await redis.set("orders:1", serializer.serialize({"id": 1, "total": 9.5}))
    await redis.hset("orders:2", mapping={"total": serializer.serialize(3), "status": b'"open"'})
    await redis.set("orders:3", b"not json")
    await redis.set("customers:1", serializer.serialize({"name": "Ann"}))


class TestListAndDelete:
    """Enumerate and delete real keys."""

    @pytest.mark.asyncio
    async def test_insert_list_delete_round_trip(self, util, redis):
        expected = [f"user:{n}" for n in range(7)]
        for key in expected:
            await redis.set(key, b"1")
        await redis.set("session:x", b"1")

        assert sorted(await util.list_keys("user")) == expected

        report = await util.delete_by_prefix("user")

        assert sorted(report.deleted) == expected
        assert report.failed == []
        assert await util.list_keys("user") == []
        assert await redis.exists("session:x") == 1

    @pytest.mark.asyncio
    async def test_fire_and_forget_on_small_pool(self, util, redis, admin_caplog):
        keys = [f"tmp:{n}" for n in range(20)]
        for key in keys:
            await redis.set(key, b"1")

        report = await util.delete_by_prefix("tmp", fire_and_forget=True)
        await util.aclose()

        assert report.keys_found == 20
        assert report.failed == []
        assert await redis.dbsize() == 0
        assert not [r for r in admin_caplog.records if r.levelno >= logging.ERROR]

    @pytest.mark.asyncio
    async def test_undecodable_key_listed_and_deleted(self, util, redis):
        await redis.set(b"bin:\xff\xfe", b"1")

        keys = await util.list_keys("bin")

        assert keys == ["bin:\udcff\udcfe"]

        report = await util.delete_by_prefix("bin")

        assert report.failed == []
        assert await redis.exists(b"bin:\xff\xfe") == 0

    @pytest.mark.asyncio
    async def test_flush_leaves_empty_not_absent(self, util, redis, orders):
        assert await util.flush_all() is True

        assert await util.list_keys("orders") == []
        assert await redis.dbsize() == 0

    @pytest.mark.asyncio
    async def test_server_down_is_absent(self, util, fake_server):
        fake_server.connected = False

        assert await util.list_keys("orders") is None


class TestAggregateMixedTypes:
    """Aggregate over keys holding different Redis types."""

    @pytest.mark.asyncio
    async def test_values_keep_only_readable(self, util, orders):
        values = await util.get_values("orders")

        assert values == {"orders:1": {"id": 1, "total": 9.5}}

    @pytest.mark.asyncio
    async def test_raw_values_skip_hashes(self, util, orders):
        values = await util.get_raw_values("orders")

        assert values == {"orders:1": '{"id":1,"total":9.5}', "orders:3": "not json"}

    @pytest.mark.asyncio
    async def test_hash_field_skips_strings(self, util, orders):
        values = await util.get_hash_field_values("orders", "total", value_type=int)

        assert values == {"orders:2": 3}

    @pytest.mark.asyncio
    async def test_fan_out_beyond_pool_size(self, util, redis):
        for n in range(30):
            await redis.set(f"item:{n}", str(n).encode())

        values = await util.get_values("item", value_type=int)

        assert values == {f"item:{n}": n for n in range(30)}
