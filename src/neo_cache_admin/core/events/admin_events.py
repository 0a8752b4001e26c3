"""Administrative log events.

ONLY event taxonomy - fixed event identifiers, levels and message
templates for everything the bulk operations report through logs.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from enum import Enum
from typing import Any, Optional


class AdminEvent(Enum):
    """Log events emitted by the cache admin operations."""

    REMOVING_KEYS = (1001, logging.WARNING, ">> REDIS: Removing keys matching: %s ...")
    REMOVE_ERROR = (1002, logging.ERROR, ">> REDIS: Error removing key %s matching: %s")
    FLUSHING = (1003, logging.WARNING, ">> RedisServer: Flushing...")
    FLUSHED_OK = (1004, logging.DEBUG, ">> RedisServer: Flushed successfully")
    FLUSH_ERROR = (1005, logging.ERROR, ">> RedisServer: Error flushing redis server")

    def __init__(self, event_id: int, level: int, template: str):
        self.event_id = event_id
        self.level = level
        self.template = template


def emit(
    logger: logging.Logger,
    event: AdminEvent,
    *args: Any,
    exc_info: Optional[BaseException] = None,
    **fields: Any
) -> None:
    """Log an admin event with its id and name attached as extras.

    Args:
        logger: Logger of the emitting module
        event: Event to emit
        *args: Values for the event's message template
        exc_info: Exception to attach, if any
        **fields: Additional structured fields
    """
    if not logger.isEnabledFor(event.level):
        return

    extra = {"event_id": event.event_id, "event_name": event.name}
    extra.update(fields)
    logger.log(event.level, event.template, *args, exc_info=exc_info, extra=extra)
