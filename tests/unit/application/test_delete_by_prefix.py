"""Tests for the bulk delete command."""

import asyncio
import logging

import pytest

from neo_cache_admin.application.commands import BulkDeleteReport, DeleteByPrefixCommand, DeleteOutcome
from neo_cache_admin.application.queries import KeyEnumerator, ListKeysQuery
from neo_cache_admin.core.exceptions import CacheTimeout
from neo_cache_admin.core.value_objects import Deadline


def _events(caplog, event_id):
    return [r for r in caplog.records if getattr(r, "event_id", None) == event_id]


class TestBulkDeleteReport:
    """Test report totals."""

    def test_totals(self):
        report = BulkDeleteReport(
            pattern="user*",
            keys_found=3,
            outcomes=[
                DeleteOutcome(key="user:1", success=True),
                DeleteOutcome(key="user:2", success=False, error="boom"),
                DeleteOutcome(key="user:3", success=True),
            ],
        )

        assert report.attempted == 3
        assert report.deleted == ["user:1", "user:3"]
        assert report.failed == ["user:2"]


class TestDeleteByPrefixCommand:
    """Test prefix deletion with per-key failure isolation."""

    @pytest.fixture
    def command(self, server_client, value_client):
        return DeleteByPrefixCommand(ListKeysQuery(KeyEnumerator(server_client)), value_client)

    @pytest.mark.asyncio
    async def test_deletes_every_matching_key(self, command, store_data, value_client):
        report = await command.execute("session")

        assert value_client.deleted == ["session:abc", "session:def"]
        assert "session:abc" not in store_data
        assert "user:1" in store_data
        assert report.pattern == "session*"
        assert report.keys_found == 2
        assert report.deleted == ["session:abc", "session:def"]
        assert report.failed == []

    @pytest.mark.asyncio
    async def test_logs_removing_keys_once(self, command, admin_caplog):
        await command.execute("user", "1")

        records = _events(admin_caplog, 1001)
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].getMessage() == ">> REDIS: Removing keys matching: user:1* ..."

    @pytest.mark.asyncio
    async def test_failed_key_is_logged_and_skipped(self, command, value_client, admin_caplog):
        value_client.failing_keys.add("user:2")

        report = await command.execute("user")

        assert value_client.calls == ["user:1", "user:2", "user:3", "user:1:profile", "user:2:profile"]
        assert report.failed == ["user:2"]
        assert len(report.deleted) == 4
        assert "injected failure" in report.outcomes[1].error

        errors = _events(admin_caplog, 1002)
        assert len(errors) == 1
        assert errors[0].levelno == logging.ERROR
        assert errors[0].key == "user:2"
        assert errors[0].pattern == "user*"
        assert errors[0].exc_info is not None

    @pytest.mark.asyncio
    async def test_every_key_failing_still_returns(self, command, value_client, store_data):
        value_client.failing_keys.update(key for key in store_data if key.startswith("session"))

        report = await command.execute("session")

        assert report.failed == ["session:abc", "session:def"]

    @pytest.mark.asyncio
    async def test_no_keys_is_silent_no_op(self, command, value_client, admin_caplog):
        report = await command.execute("missing")

        assert report.keys_found == 0
        assert report.outcomes == []
        assert value_client.calls == []
        assert _events(admin_caplog, 1001) == []

    @pytest.mark.asyncio
    async def test_unavailable_is_silent_no_op(self, command, server_client, value_client, admin_caplog):
        server_client.available = False

        report = await command.execute("user")

        assert report.keys_found == 0
        assert value_client.calls == []
        assert _events(admin_caplog, 1001) == []

    @pytest.mark.asyncio
    async def test_fire_and_forget_passed_through(self, command, value_client):
        report = await command.execute("session", fire_and_forget=True)

        assert value_client.fire_and_forget_flags == [True, True]
        assert report.fire_and_forget

    @pytest.mark.asyncio
    async def test_deadline_stops_batch(self, command, value_client):
        value_client.delay = 0.05

        with pytest.raises(CacheTimeout) as exc_info:
            await command.execute("user", deadline=Deadline.after(0.12))

        details = exc_info.value.details
        assert details["pattern"] == "user*"
        assert details["total"] == 5
        assert 0 < details["attempted"] < 5
        assert len(value_client.calls) < 5

    @pytest.mark.asyncio
    async def test_cancellation_stops_batch(self, command, value_client):
        value_client.delay = 0.05
        task = asyncio.create_task(command.execute("user"))
        await asyncio.sleep(0.07)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        # Deletes already issued stand
        assert value_client.deleted == ["user:1"]


class TestDeleteFanOut:
    """Test concurrent bulk deletes."""

    @pytest.fixture
    def command(self, server_client, value_client):
        value_client.delay = 0.01
        return DeleteByPrefixCommand(
            ListKeysQuery(KeyEnumerator(server_client)), value_client, max_concurrency=3
        )

    @pytest.mark.asyncio
    async def test_failure_does_not_cancel_siblings(self, command, value_client, admin_caplog):
        value_client.failing_keys.update({"user:1", "user:3"})

        report = await command.execute("user")

        assert sorted(report.failed) == ["user:1", "user:3"]
        assert sorted(report.deleted) == ["user:1:profile", "user:2", "user:2:profile"]
        assert len(_events(admin_caplog, 1002)) == 2
        assert value_client.max_in_flight == 3
