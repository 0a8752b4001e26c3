"""Deadline value object.

ONLY deadline tracking - an absolute event-loop time threaded through
every suspension point of one public operation.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Deadline:
    """Deadline value object.

    ``when`` is in event loop time (``loop.time()``). A deadline without
    ``when`` never expires; ``scope()`` is then a no-op timeout.
    """

    when: Optional[float] = None
    timeout_seconds: Optional[float] = None

    @classmethod
    def after(cls, seconds: Optional[float]) -> "Deadline":
        """Create a deadline ``seconds`` from now (must run inside a loop)."""
        if seconds is None:
            return cls.none()
        if seconds < 0:
            raise ValueError("Timeout cannot be negative")
        loop = asyncio.get_running_loop()
        return cls(when=loop.time() + seconds, timeout_seconds=seconds)

    @classmethod
    def none(cls) -> "Deadline":
        """Create an unbounded deadline."""
        return cls()

    @property
    def unbounded(self) -> bool:
        return self.when is None

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when unbounded."""
        if self.when is None:
            return None
        return max(0.0, self.when - asyncio.get_running_loop().time())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def scope(self) -> asyncio.Timeout:
        """Timeout context bounded by this deadline."""
        return asyncio.timeout_at(self.when)

    async def wait(self, awaitable: Awaitable[T], on_expiry: Callable[[], BaseException]) -> T:
        """Await within this deadline.

        Raises ``on_expiry()`` if the deadline passes first. A TimeoutError
        raised by the awaitable itself propagates unchanged.
        """
        scope = self.scope()
        try:
            async with scope:
                return await awaitable
        except TimeoutError as e:
            if scope.expired():
                raise on_expiry() from e
            raise
