"""Cache admin queries."""

from .enumerate_keys import KeyEnumerator
from .list_keys import ListKeysQuery
from .aggregate_values import AggregateValuesQuery

__all__ = [
    "KeyEnumerator",
    "ListKeysQuery",
    "AggregateValuesQuery",
]
