"""
Agent settings service.

Holds the operator's IndiaMART settings for the lifetime of the process.
Readers get an immutable AgentSettings snapshot; only update() replaces it.
"""

from typing import Optional

import structlog

from config import settings as app_settings
from models.agent_settings import AgentMode, AgentSettings, AgentSettingsUpdate

logger = structlog.get_logger(__name__)


class AgentSettingsService:
    """In-memory store for AgentSettings."""

    def __init__(self, initial: Optional[AgentSettings] = None):
        self._current = initial or AgentSettings(
            base_url=app_settings.indiamart_base_url,
            mode=AgentMode(app_settings.default_agent_mode),
            auto_start=app_settings.default_auto_start,
        )

    def snapshot(self) -> AgentSettings:
        """Current settings. Safe to hold on to; never mutated."""
        return self._current

    def update(self, data: AgentSettingsUpdate) -> AgentSettings:
        """
        Apply a partial update.

        Args:
            data: Fields to change (unset fields keep their value)

        Returns:
            The new settings snapshot
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        self._current = AgentSettings(**{**self._current.model_dump(), **changes})

        logger.info(
            "agent_settings_updated",
            fields=sorted(changes),
            mode=self._current.mode.value,
            auto_start=self._current.auto_start,
        )
        return self._current


# Singleton instance for convenience
_agent_settings_service: Optional[AgentSettingsService] = None


def get_agent_settings_service() -> AgentSettingsService:
    """Get or create AgentSettingsService instance."""
    global _agent_settings_service
    if _agent_settings_service is None:
        _agent_settings_service = AgentSettingsService()
    return _agent_settings_service
