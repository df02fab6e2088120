"""
Activity log schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import CamelSchema


class LogLevel(str, Enum):
    """Severity of an activity entry."""
    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"


class LogEntry(CamelSchema):
    """
    One activity event shown in the console feed.

    item_id is set for events about a specific queued item
    (processing, uploaded, failed).
    """

    id: str = Field(..., description="Entry UUID")
    level: LogLevel
    headline: str
    details: Optional[str] = None
    timestamp: datetime
    item_id: Optional[str] = Field(None, description="Queued item the event belongs to")


class LogListResponse(CamelSchema):
    """Newest-first activity feed."""

    data: list[LogEntry]
    total: int
    capacity: int
