"""
IndiaMART submission route.

POST /api/indiamart is the boundary the console uses to push (or simulate)
one product. Error bodies are flat ({"error": "..."}) because the console
reads result.error directly.
"""

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
import structlog

from exceptions import AppError, BadRequestError, MalformedRequestError, RemoteRejectedError
from integrations.indiamart import get_indiamart_gateway
from models.catalog import SubmitRequest

logger = structlog.get_logger(__name__)

router = APIRouter()


def error_response(e: Exception) -> JSONResponse:
    """Convert exception to the flat error body of this endpoint."""
    if isinstance(e, RemoteRejectedError):
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.message, "status": e.remote_status, "response": e.response},
        )
    if isinstance(e, AppError):
        return JSONResponse(status_code=e.status_code, content={"error": e.message})

    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(status_code=500, content={"error": "An unexpected error occurred"})


@router.post("")
async def submit_product(request: Request):
    """
    Submit one product to IndiaMART.

    Body: {"settings": {...}, "product": {...}}

    Returns:
        200 {"status": "simulated", "payload": {...}}
        200 {"status": "success", "response": ...}

    Raises:
        400: Malformed JSON, missing product, missing fields, missing credentials
        502: IndiaMART rejected the product
        504: IndiaMART unreachable
    """
    try:
        body: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return error_response(MalformedRequestError())

    try:
        submit_request = SubmitRequest.model_validate(body)
    except PydanticValidationError as e:
        logger.warning("submit_invalid_payload", errors=e.error_count())
        return error_response(
            MalformedRequestError(
                message="Invalid request payload.",
                details={"errors": e.errors(include_url=False, include_context=False)},
            )
        )

    if submit_request.product is None:
        return error_response(BadRequestError("Product payload not provided.", code="MISSING_PRODUCT"))

    try:
        gateway = get_indiamart_gateway()
        result = await gateway.submit(submit_request.product, submit_request.settings)
        return JSONResponse(status_code=200, content=result.to_wire())
    except Exception as e:
        return error_response(e)
