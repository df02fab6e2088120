"""
Business logic services.

Each service handles one area of the upload agent.
"""

from services.activity_log_service import ActivityLogService, get_activity_log_service
from services.agent_settings_service import AgentSettingsService, get_agent_settings_service
from services.draft_service import normalize_draft, generate_descriptions
from services.queue_runner_service import QueueRunnerService, get_queue_runner_service
from services.import_service import ImportService, get_import_service
from services.export_service import export_drafts_csv, sample_csv

__all__ = [
    "ActivityLogService",
    "get_activity_log_service",
    "AgentSettingsService",
    "get_agent_settings_service",
    "normalize_draft",
    "generate_descriptions",
    "QueueRunnerService",
    "get_queue_runner_service",
    "ImportService",
    "get_import_service",
    "export_drafts_csv",
    "sample_csv",
]
