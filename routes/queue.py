"""
Upload queue API routes.

Queue control for the console: enqueue drafts, import a CSV, start/stop the
runner, export pending drafts.
"""

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse, Response
import structlog

from exceptions import AppError
from models.product import ProductDraft
from models.queue import CsvImportResponse, QueueStatusResponse, QueuedItem
from services.export_service import export_drafts_csv, sample_csv
from services.import_service import get_import_service
from services.queue_runner_service import get_queue_runner_service

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

@router.get("", response_model=QueueStatusResponse)
async def get_queue():
    """Runner state and pending items in dispatch order."""
    return get_queue_runner_service().status()


@router.post("", response_model=QueuedItem, status_code=201)
async def enqueue_draft(draft: ProductDraft):
    """
    Queue a product draft.

    Raises:
        422: Draft has no title
    """
    try:
        return await get_queue_runner_service().enqueue(draft)
    except Exception as e:
        return handle_error(e)


@router.post("/start", response_model=QueueStatusResponse)
async def start_queue():
    """Start draining the queue (logs "Queue empty" if nothing is pending)."""
    try:
        runner = get_queue_runner_service()
        await runner.start()
        return runner.status()
    except Exception as e:
        return handle_error(e)


@router.post("/stop", response_model=QueueStatusResponse)
async def stop_queue():
    """Pause the runner. An upload already in flight still completes."""
    try:
        runner = get_queue_runner_service()
        await runner.stop()
        return runner.status()
    except Exception as e:
        return handle_error(e)


@router.post("/import", response_model=CsvImportResponse)
async def import_csv(file: UploadFile = File(...)):
    """
    Queue every row of a product CSV.

    Raises:
        422: Empty file or header mismatch (nothing queued)
    """
    try:
        contents = await file.read()
        return await get_import_service().import_csv(contents, filename=file.filename)
    except Exception as e:
        return handle_error(e)


@router.get("/export.csv")
async def export_queue():
    """
    Pending drafts in the import template format.

    Raises:
        422: A pending draft has multi-line fields
    """
    try:
        drafts = [item.payload for item in get_queue_runner_service().items]
        content = export_drafts_csv(drafts)
    except Exception as e:
        return handle_error(e)

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="queue.csv"'},
    )


@router.get("/sample.csv")
async def download_sample():
    """Import template with one example product."""
    return Response(
        content=sample_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="sample.csv"'},
    )
