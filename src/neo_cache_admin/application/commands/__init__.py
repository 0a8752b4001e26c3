"""Cache admin commands."""

from .delete_by_prefix import BulkDeleteReport, DeleteByPrefixCommand, DeleteOutcome
from .flush_all import FlushAllCommand

__all__ = [
    "BulkDeleteReport",
    "DeleteByPrefixCommand",
    "DeleteOutcome",
    "FlushAllCommand",
]
