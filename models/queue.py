"""
Upload queue schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import CamelSchema
from models.product import ProductDraft


class RunnerState(str, Enum):
    """Queue runner lifecycle."""
    IDLE = "idle"
    RUNNING = "running"


class QueuedItem(CamelSchema):
    """
    A draft waiting for upload.

    Created on enqueue, removed after its single dispatch attempt.
    """

    id: str = Field(..., description="Queue item UUID, never reused")
    created_at: datetime
    payload: ProductDraft


class QueueStatusResponse(CamelSchema):
    """Snapshot of the queue runner."""

    state: RunnerState
    active_item_id: Optional[str] = None
    pending: int
    items: list[QueuedItem]


class CsvImportResponse(CamelSchema):
    """Outcome of a CSV import."""

    rows: int = Field(..., description="Product rows found in the file")
    queued: int = Field(..., description="Rows added to the queue")
    skipped: int = Field(..., description="Rows rejected (e.g. missing title)")
    item_ids: list[str] = Field(default_factory=list)
