"""List keys query.

ONLY key materialization - drains the lazy key sequence into a list so
callers get a known count and random access.

Following maximum separation architecture - one file = one purpose.
"""

from typing import List, Optional

from ...core.value_objects.deadline import Deadline
from .enumerate_keys import KeyEnumerator


class ListKeysQuery:
    """Query to list every key under a prefix.

    None (store unavailable) and [] (nothing matched) are kept distinct.
    """

    def __init__(self, enumerator: KeyEnumerator):
        """Initialize list keys query.

        Args:
            enumerator: Key enumerator to drain
        """
        self._enumerator = enumerator

    async def execute(
        self,
        prefix: str,
        sub_prefix: Optional[str] = None,
        *,
        deadline: Optional[Deadline] = None
    ) -> Optional[List[str]]:
        """Execute key listing.

        Returns:
            Keys in scan order, or None if enumeration could not start
        """
        keys = await self._enumerator.enumerate_by_prefix(prefix, sub_prefix, deadline=deadline)
        if keys is None:
            return None

        return [key async for key in keys]
