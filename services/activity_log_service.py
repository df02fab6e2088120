"""
Activity log service.

Bounded, append-only feed of queue events shown in the console. Holds the
most recent entries only; older ones are evicted as new ones arrive.
Every entry is mirrored to the structured application log.
"""

from collections import deque
from datetime import datetime, timezone
from typing import Optional
import uuid

import structlog

from config import settings
from models.activity_log import LogEntry, LogLevel

logger = structlog.get_logger(__name__)


class ActivityLogService:
    """
    Ring buffer of LogEntry objects.

    Reads are newest-first.
    """

    def __init__(self, capacity: int = 50):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    def append(
        self,
        level: LogLevel,
        headline: str,
        details: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> LogEntry:
        """
        Record an event.

        Args:
            level: info, error or success
            headline: Short summary
            details: Optional longer message
            item_id: Queued item the event refers to

        Returns:
            The stored entry
        """
        entry = LogEntry(
            id=str(uuid.uuid4()),
            level=level,
            headline=headline,
            details=details,
            timestamp=datetime.now(timezone.utc),
            item_id=item_id,
        )
        self._entries.append(entry)

        log = logger.error if level == LogLevel.ERROR else logger.info
        log("activity", activity_level=level.value, headline=headline, details=details, item_id=item_id)

        return entry

    def info(self, headline: str, details: Optional[str] = None, item_id: Optional[str] = None) -> LogEntry:
        return self.append(LogLevel.INFO, headline, details, item_id)

    def success(self, headline: str, details: Optional[str] = None, item_id: Optional[str] = None) -> LogEntry:
        return self.append(LogLevel.SUCCESS, headline, details, item_id)

    def error(self, headline: str, details: Optional[str] = None, item_id: Optional[str] = None) -> LogEntry:
        return self.append(LogLevel.ERROR, headline, details, item_id)

    def entries(self) -> list[LogEntry]:
        """All retained entries, newest first."""
        return list(reversed(self._entries))

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# Singleton instance for convenience
_activity_log_service: Optional[ActivityLogService] = None


def get_activity_log_service() -> ActivityLogService:
    """Get or create ActivityLogService instance."""
    global _activity_log_service
    if _activity_log_service is None:
        _activity_log_service = ActivityLogService(capacity=settings.activity_log_capacity)
    return _activity_log_service
