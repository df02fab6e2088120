"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, CamelSchema
from models.product import (
    DRAFT_FIELDS,
    ProductDraft,
    NormalizedProduct,
    DescriptionSuggestion,
)
from models.agent_settings import (
    AgentMode,
    AgentSettings,
    AgentSettingsUpdate,
    AgentSettingsResponse,
)
from models.activity_log import LogLevel, LogEntry, LogListResponse
from models.queue import (
    RunnerState,
    QueuedItem,
    QueueStatusResponse,
    CsvImportResponse,
)
from models.catalog import SubmitStatus, SubmitRequest, SubmitResult

__all__ = [
    # Base
    "BaseSchema",
    "CamelSchema",

    # Product
    "DRAFT_FIELDS",
    "ProductDraft",
    "NormalizedProduct",
    "DescriptionSuggestion",

    # Agent settings
    "AgentMode",
    "AgentSettings",
    "AgentSettingsUpdate",
    "AgentSettingsResponse",

    # Activity log
    "LogLevel",
    "LogEntry",
    "LogListResponse",

    # Queue
    "RunnerState",
    "QueuedItem",
    "QueueStatusResponse",
    "CsvImportResponse",

    # Catalog
    "SubmitStatus",
    "SubmitRequest",
    "SubmitResult",
]
