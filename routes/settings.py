"""
Agent settings API routes.

Backs the console's settings panel. The API key is write-only: responses
only say whether one is set.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.agent_settings import AgentSettingsUpdate, AgentSettingsResponse
from services.agent_settings_service import get_agent_settings_service
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=AgentSettingsResponse)
async def get_agent_settings():
    """Current agent settings (API key masked)."""
    service = get_agent_settings_service()
    return AgentSettingsResponse.from_settings(service.snapshot())


@router.put("", response_model=AgentSettingsResponse)
async def update_agent_settings(data: AgentSettingsUpdate):
    """
    Update agent settings.

    Only provided fields change. A mode change applies from the next
    dispatched product; an upload in flight keeps the settings it started with.
    """
    try:
        service = get_agent_settings_service()
        return AgentSettingsResponse.from_settings(service.update(data))
    except Exception as e:
        return handle_error(e)
