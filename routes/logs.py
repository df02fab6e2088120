"""
Activity log API routes.
"""

from fastapi import APIRouter

from models.activity_log import LogListResponse
from services.activity_log_service import get_activity_log_service

router = APIRouter()


@router.get("", response_model=LogListResponse)
async def list_logs():
    """Most recent activity, newest first."""
    service = get_activity_log_service()
    entries = service.entries()
    return LogListResponse(data=entries, total=len(entries), capacity=service.capacity)
