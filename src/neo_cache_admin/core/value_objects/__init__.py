"""Cache admin value objects."""

from .key_prefix import KEY_SEPARATOR, WILDCARD, KeyPrefix, build_prefix
from .search_pattern import SearchPattern, ensure_wildcard
from .deadline import Deadline

__all__ = [
    "KEY_SEPARATOR",
    "WILDCARD",
    "KeyPrefix",
    "build_prefix",
    "SearchPattern",
    "ensure_wildcard",
    "Deadline",
]
