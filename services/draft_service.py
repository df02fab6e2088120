"""
Draft service for product drafts.

Turns operator text into the structured record the gateway uploads, and
generates template descriptions for a draft.
"""

import structlog

from models.product import ProductDraft, NormalizedProduct, DescriptionSuggestion
from utils.text_utils import split_delimited

logger = structlog.get_logger(__name__)

FALLBACK_TITLE = "This product"
FALLBACK_HIGHLIGHTS = "premium quality build with reliable performance"
FALLBACK_CATEGORY = "industrial supplies"
FALLBACK_STOCK = "custom quantities"


def normalize_draft(draft: ProductDraft) -> NormalizedProduct:
    """
    Explode the list-like fields of a draft.

    - features, image_urls: one entry per line
    - keywords: comma-separated

    Entries are trimmed, empty ones dropped, order preserved. Missing values
    become empty lists.

    Args:
        draft: Raw draft as typed or imported

    Returns:
        NormalizedProduct ready for the gateway
    """
    values = draft.model_dump()
    values["features"] = split_delimited(draft.features, "\n")
    values["image_urls"] = split_delimited(draft.image_urls, "\n")
    values["keywords"] = split_delimited(draft.keywords, ",")
    return NormalizedProduct(**values)


def generate_descriptions(draft: ProductDraft) -> DescriptionSuggestion:
    """
    Build short and long descriptions from the draft's other fields.

    Uses the title, the features (lower-cased, comma-joined), category and
    stock, with generic fallbacks for whatever is empty.
    """
    features = split_delimited(draft.features, "\n")
    highlights = ", ".join(features) if features else FALLBACK_HIGHLIGHTS
    highlights = highlights.lower()
    title = draft.title or FALLBACK_TITLE

    short_description = f"{title} delivers {highlights}."
    description = (
        f"{title} is engineered for businesses that need dependable supply. "
        f"Key highlights include {highlights}. "
        f"Suitable for categories like {draft.category or FALLBACK_CATEGORY} "
        f"with ready stock of {draft.stock or FALLBACK_STOCK}."
    )

    logger.debug("descriptions_generated", title=title, feature_count=len(features))

    return DescriptionSuggestion(
        short_description=short_description,
        description=description,
    )
