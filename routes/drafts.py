"""
Draft API routes.

Helpers for the product draft form: description generation and a preview
of what would be sent to IndiaMART.
"""

from fastapi import APIRouter
import structlog

from integrations.indiamart import build_payload, normalize_settings
from models.product import ProductDraft, DescriptionSuggestion
from services.activity_log_service import get_activity_log_service
from services.agent_settings_service import get_agent_settings_service
from services.draft_service import generate_descriptions, normalize_draft

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("/generate-descriptions", response_model=DescriptionSuggestion)
async def generate_draft_descriptions(draft: ProductDraft):
    """
    Generate short and long descriptions for a draft.

    Returns:
        Suggested shortDescription and description
    """
    suggestion = generate_descriptions(draft)
    get_activity_log_service().success(
        "Descriptions generated",
        "Draft updated using the agent template.",
    )
    return suggestion


@router.post("/normalize")
async def preview_draft(draft: ProductDraft):
    """
    Normalize a draft and build the IndiaMART payload it would produce.

    Returns:
        {"product": NormalizedProduct, "payload": {...}}
    """
    product = normalize_draft(draft)
    agent_settings = normalize_settings(get_agent_settings_service().snapshot())
    return {
        "product": product.to_wire(),
        "payload": build_payload(product, agent_settings),
    }
