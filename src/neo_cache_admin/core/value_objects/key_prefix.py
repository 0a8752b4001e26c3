"""Key prefix value object.

ONLY prefix construction - the single key-building rule shared by every
public operation. A built prefix never ends in a wildcard; the wildcard
is added later, exactly once, by SearchPattern.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from typing import Optional

from ..exceptions.cache_key_invalid import CacheKeyInvalid

KEY_SEPARATOR = ":"
WILDCARD = "*"


@dataclass(frozen=True)
class KeyPrefix:
    """Key prefix value object.

    Immutable namespace plus optional sub-segment, joined with a colon
    (``user:123`` from ``("user", "123")``). Trailing wildcards are
    stripped so the value can be handed between stages safely.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise CacheKeyInvalid.wrong_type(self.value)
        if self.value.endswith(WILDCARD):
            object.__setattr__(self, "value", self.value.rstrip(WILDCARD))

    @classmethod
    def build(cls, namespace: str, sub_prefix: Optional[str] = None) -> "KeyPrefix":
        """Build a key prefix from a namespace and optional sub-prefix."""
        if namespace is None:
            raise CacheKeyInvalid.missing_namespace()
        if not isinstance(namespace, str):
            raise CacheKeyInvalid.wrong_type(namespace)
        if sub_prefix is not None and not isinstance(sub_prefix, str):
            raise CacheKeyInvalid.wrong_type(sub_prefix)

        if not sub_prefix:
            return cls(namespace)
        return cls(f"{namespace}{KEY_SEPARATOR}{sub_prefix}")

    def __str__(self) -> str:
        return self.value


def build_prefix(namespace: str, sub_prefix: Optional[str] = None) -> str:
    """Build the canonical key prefix string (no trailing wildcard)."""
    return KeyPrefix.build(namespace, sub_prefix).value
