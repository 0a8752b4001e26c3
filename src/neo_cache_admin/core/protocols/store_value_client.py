"""Store value client protocol.

ONLY per-key contract - point reads with deserialization and point
deletes against the cache server.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Optional, Type
from typing_extensions import Protocol, runtime_checkable


@runtime_checkable
class StoreValueClient(Protocol):
    """Cache value client protocol.

    ``concurrency_safe`` declares whether one instance may serve several
    in-flight calls at once; bulk operations only fan out when it is True.
    """

    concurrency_safe: bool

    async def get(self, key: str, value_type: Optional[Type[Any]] = None) -> Optional[Any]:
        """Get and deserialize a value.

        Returns None when the key is missing or cannot be deserialized
        into ``value_type``.
        """
        ...

    async def get_string(self, key: str) -> Optional[str]:
        """Get a raw string value without deserialization."""
        ...

    async def get_hash_field(
        self,
        key: str,
        field: str,
        value_type: Optional[Type[Any]] = None
    ) -> Optional[Any]:
        """Get and deserialize one field of a hash."""
        ...

    async def delete(self, key: str, fire_and_forget: bool = False) -> None:
        """Delete a key.

        With ``fire_and_forget`` the delete is dispatched without waiting
        for the server's acknowledgment.
        """
        ...
