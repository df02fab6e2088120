"""
IndiaMART submission schemas.

SubmitRequest is the body of the internal POST /api/indiamart boundary;
SubmitResult is what the gateway returns on success.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import Field

from models.base import CamelSchema
from models.agent_settings import AgentSettings
from models.product import NormalizedProduct


class SubmitStatus(str, Enum):
    """Successful outcome of a submission."""
    SIMULATED = "simulated"
    SUCCESS = "success"


class SubmitRequest(CamelSchema):
    """Body accepted by the internal submission endpoint."""

    settings: AgentSettings = Field(default_factory=AgentSettings)
    product: Optional[NormalizedProduct] = None


class SubmitResult(CamelSchema):
    """
    Successful submission.

    payload is set for simulated runs (what would have been sent);
    response is the decoded body of a live 2xx answer.
    """

    status: SubmitStatus
    payload: Optional[dict[str, str]] = None
    response: Any = None

    def to_wire(self) -> dict:
        body: dict[str, Any] = {"status": self.status.value}
        if self.status == SubmitStatus.SIMULATED:
            body["payload"] = self.payload
        else:
            body["response"] = self.response
        return body
