"""Search pattern value object.

ONLY pattern normalization - prefix plus exactly one trailing wildcard,
handed to the store's cursor scan and nowhere else.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass

from .key_prefix import WILDCARD, KeyPrefix


def ensure_wildcard(prefix_or_pattern: str) -> str:
    """Append a wildcard unless the input already ends with one."""
    if prefix_or_pattern.endswith(WILDCARD):
        return prefix_or_pattern
    return prefix_or_pattern + WILDCARD


@dataclass(frozen=True)
class SearchPattern:
    """Search pattern value object."""

    value: str

    @classmethod
    def from_prefix(cls, prefix: "str | KeyPrefix") -> "SearchPattern":
        """Create pattern from a prefix, tolerating an existing wildcard."""
        return cls(ensure_wildcard(str(prefix)))

    def __str__(self) -> str:
        return self.value
