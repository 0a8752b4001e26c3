"""Delete by prefix command.

ONLY bulk deletion - removes every key under a prefix, isolating per-key
failures so one bad key never aborts the batch.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ...core.events.admin_events import AdminEvent, emit
from ...core.exceptions.cache_timeout import CacheTimeout
from ...core.protocols.store_value_client import StoreValueClient
from ...core.value_objects.deadline import Deadline
from ...core.value_objects.key_prefix import build_prefix
from ...core.value_objects.search_pattern import SearchPattern
from ..queries.list_keys import ListKeysQuery

logger = logging.getLogger(__name__)


@dataclass
class DeleteOutcome:
    """Result of one per-key delete attempt."""

    key: str
    success: bool
    error: Optional[str] = None


@dataclass
class BulkDeleteReport:
    """Summary of a bulk delete."""

    pattern: str
    keys_found: int = 0
    outcomes: List[DeleteOutcome] = field(default_factory=list)
    fire_and_forget: bool = False

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def deleted(self) -> List[str]:
        """Keys whose delete was issued without error.

        With fire_and_forget these were dispatched, not confirmed; a failed
        dispatched delete is only logged.
        """
        return [outcome.key for outcome in self.outcomes if outcome.success]

    @property
    def failed(self) -> List[str]:
        return [outcome.key for outcome in self.outcomes if not outcome.success]


class DeleteByPrefixCommand:
    """Command to delete every key matching a prefix.

    Absent or empty enumerations are a no-op. Per-key errors are logged
    and skipped; cancellation and deadline expiry stop the batch, while
    deletes already issued stand.
    """

    def __init__(
        self,
        list_query: ListKeysQuery,
        value_client: StoreValueClient,
        max_concurrency: int = 1
    ):
        """Initialize delete by prefix command.

        Args:
            list_query: Key listing query
            value_client: Store value client issuing the deletes
            max_concurrency: Maximum in-flight deletes (1 = sequential)
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self._list_query = list_query
        self._value_client = value_client
        self._max_concurrency = max_concurrency

    async def execute(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        fire_and_forget: bool = False,
        deadline: Optional[Deadline] = None
    ) -> BulkDeleteReport:
        """Execute bulk delete.

        Args:
            prefix: Namespace or fully built prefix
            sub_prefix: Optional sub-segment joined to the namespace
            fire_and_forget: Dispatch deletes without awaiting the reply
            deadline: Bound for enumeration and the whole delete loop

        Returns:
            Report of every attempted key
        """
        deadline = deadline or Deadline.none()
        pattern = SearchPattern.from_prefix(build_prefix(prefix, sub_prefix)).value
        report = BulkDeleteReport(pattern=pattern, fire_and_forget=fire_and_forget)

        keys = await self._list_query.execute(prefix, sub_prefix, deadline=deadline)
        if not keys:
            return report

        report.keys_found = len(keys)
        emit(logger, AdminEvent.REMOVING_KEYS, pattern, pattern=pattern, key_count=len(keys))

        if self._fans_out():
            deleting = self._delete_concurrently(keys, pattern, fire_and_forget, report)
        else:
            deleting = self._delete_sequentially(keys, pattern, fire_and_forget, report)

        await deadline.wait(
            deleting,
            lambda: CacheTimeout.delete_batch(
                pattern, report.attempted, report.keys_found, deadline.timeout_seconds
            ),
        )

        if report.failed:
            logger.info(
                f"Deleted {len(report.deleted)} of {report.keys_found} keys matching {pattern}, "
                f"{len(report.failed)} failed"
            )
        return report

    def _fans_out(self) -> bool:
        return self._max_concurrency > 1 and getattr(self._value_client, "concurrency_safe", False)

    async def _delete_sequentially(
        self,
        keys: List[str],
        pattern: str,
        fire_and_forget: bool,
        report: BulkDeleteReport
    ) -> None:
        for key in keys:
            report.outcomes.append(await self._delete_one(key, pattern, fire_and_forget))

    async def _delete_concurrently(
        self,
        keys: List[str],
        pattern: str,
        fire_and_forget: bool,
        report: BulkDeleteReport
    ) -> None:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def delete_one(key: str) -> None:
            async with semaphore:
                report.outcomes.append(await self._delete_one(key, pattern, fire_and_forget))

        # _delete_one never raises except on cancellation, so siblings keep running
        async with asyncio.TaskGroup() as group:
            for key in keys:
                group.create_task(delete_one(key))

    async def _delete_one(self, key: str, pattern: str, fire_and_forget: bool) -> DeleteOutcome:
        try:
            await self._value_client.delete(key, fire_and_forget=fire_and_forget)
        except Exception as e:
            emit(logger, AdminEvent.REMOVE_ERROR, key, pattern, exc_info=e, key=key, pattern=pattern)
            return DeleteOutcome(key=key, success=False, error=str(e))
        return DeleteOutcome(key=key, success=True)
