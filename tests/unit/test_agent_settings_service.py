"""
Unit tests for AgentSettingsService and the settings schemas.
"""

import pydantic
import pytest

from models.agent_settings import (
    AgentMode,
    AgentSettings,
    AgentSettingsResponse,
    AgentSettingsUpdate,
)
from services.agent_settings_service import AgentSettingsService


class TestAgentSettingsService:
    """Tests for snapshot() and update()"""

    def test_partial_update_keeps_other_fields(self):
        service = AgentSettingsService(initial=AgentSettings(api_key="key-1", seller_id="S1"))

        updated = service.update(AgentSettingsUpdate(mode=AgentMode.LIVE))

        assert updated.mode == AgentMode.LIVE
        assert updated.api_key == "key-1"
        assert updated.seller_id == "S1"

    def test_earlier_snapshot_unchanged(self):
        service = AgentSettingsService(initial=AgentSettings())
        before = service.snapshot()

        service.update(AgentSettingsUpdate(api_key="new-key", mode=AgentMode.LIVE))

        assert before.api_key == ""
        assert before.mode == AgentMode.SIMULATE
        assert service.snapshot().api_key == "new-key"

    def test_snapshot_is_frozen(self):
        snapshot = AgentSettingsService(initial=AgentSettings()).snapshot()

        with pytest.raises(pydantic.ValidationError):
            snapshot.api_key = "changed"

    def test_camel_case_update(self):
        service = AgentSettingsService(initial=AgentSettings())

        updated = service.update(AgentSettingsUpdate.model_validate({"sellerId": "S9", "autoStart": False}))

        assert updated.seller_id == "S9"
        assert updated.auto_start is False

    def test_invalid_mode_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            AgentSettingsUpdate.model_validate({"mode": "turbo"})

    def test_defaults_from_config(self):
        settings = AgentSettingsService().snapshot()

        assert settings.mode == AgentMode.SIMULATE
        assert settings.base_url.startswith("https://")


class TestAgentSettingsResponse:
    """API key masking."""

    def test_key_masked(self):
        response = AgentSettingsResponse.from_settings(AgentSettings(api_key="secret-token-1234"))

        wire = response.to_wire()
        assert wire["apiKeySet"] is True
        assert wire["apiKeyHint"] == "...1234"
        assert "apiKey" not in wire

    def test_no_key(self):
        response = AgentSettingsResponse.from_settings(AgentSettings())

        assert response.api_key_set is False
        assert response.api_key_hint == ""
