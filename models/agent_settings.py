"""
Agent settings schemas.

AgentSettings are the operator's IndiaMART credentials and queue behaviour.
They are frozen: the queue runner takes one per dispatch and nothing can
change it while that upload is in flight.
"""

from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.base import CamelSchema


class AgentMode(str, Enum):
    """How uploads are performed."""
    SIMULATE = "simulate"
    LIVE = "live"


class AgentSettings(CamelSchema):
    """Immutable snapshot of the operator settings."""

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    api_key: str = Field("", description="IndiaMART auth token (sent as authtoken header)")
    seller_id: str = Field("", description="IndiaMART seller ID")
    base_url: str = Field("", description="Catalogue endpoint; empty uses the default")
    mode: AgentMode = Field(AgentMode.SIMULATE, description="simulate or live")
    auto_start: bool = Field(True, description="Start draining when a product is queued")

    @property
    def is_live(self) -> bool:
        return self.mode == AgentMode.LIVE


class AgentSettingsUpdate(CamelSchema):
    """
    Partial update from the settings panel.

    Only fields that are provided are changed.
    """

    api_key: Optional[str] = None
    seller_id: Optional[str] = None
    base_url: Optional[str] = None
    mode: Optional[AgentMode] = None
    auto_start: Optional[bool] = None


class AgentSettingsResponse(CamelSchema):
    """Settings as shown to the console (API key masked)."""

    api_key_set: bool
    api_key_hint: str = ""
    seller_id: str
    base_url: str
    mode: AgentMode
    auto_start: bool

    @classmethod
    def from_settings(cls, settings: AgentSettings) -> "AgentSettingsResponse":
        key = settings.api_key
        return cls(
            api_key_set=bool(key),
            api_key_hint=f"...{key[-4:]}" if len(key) > 4 else "",
            seller_id=settings.seller_id,
            base_url=settings.base_url,
            mode=settings.mode,
            auto_start=settings.auto_start,
        )
