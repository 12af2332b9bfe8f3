"""Comment aggregator - collects plugin notices into one PR comment."""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from pullie.constants import COMMENT_SEPARATOR

logger = logging.getLogger(__name__)


class Priority(IntEnum):
    """Comment priorities. Higher priorities are posted first."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2


@dataclass
class Comment:
    """A single queued notice."""

    message: str
    priority: Priority


class Commenter:
    """Unified commenter.

    One instance is created per webhook event. Plugins queue notices with
    ``add_comment`` and the processor drains them with ``flush_to_string``.
    """

    Priority = Priority

    def __init__(self):
        self.comments: List[Comment] = []

    def add_comment(self, message: str, priority: Priority) -> None:
        """Add a comment to the queue.

        Args:
            message: The message to post, must be non-empty
            priority: One of the ``Priority`` levels

        Raises:
            ValueError: If the message is empty or the priority is out of range
        """
        if not message or not _is_valid_priority(priority):
            raise ValueError("Missing message or priority")

        self.comments.append(Comment(message=message, priority=Priority(priority)))

    def flush_to_string(self) -> Optional[str]:
        """Drain the queue into a single string.

        Returns:
            All queued comments sorted by descending priority and joined with
            a horizontal rule, or None if nothing was queued
        """
        if not self.comments:
            return None

        # sorted() is stable, so equal priorities keep insertion order
        ordered = sorted(self.comments, key=lambda c: c.priority, reverse=True)
        self.comments = []

        logger.debug(f"[Commenter] Flushing {len(ordered)} comment(s)")
        return COMMENT_SEPARATOR.join(c.message for c in ordered)


def _is_valid_priority(priority) -> bool:
    if isinstance(priority, bool) or not isinstance(priority, int):
        return False
    return Priority.LOW <= priority <= Priority.HIGH
