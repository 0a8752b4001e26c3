"""Cache admin log events."""

from .admin_events import AdminEvent, emit

__all__ = [
    "AdminEvent",
    "emit",
]
