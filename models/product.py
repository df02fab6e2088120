"""
Product draft schemas.

A ProductDraft is what the operator types (or what one CSV row holds):
every field is plain text, list-like fields are still delimited strings.
A NormalizedProduct is the same record with those fields exploded into lists,
which is the shape the IndiaMART gateway consumes.
"""

from pydantic import Field, field_validator

from models.base import CamelSchema


# Field order of the CSV template and of every export
DRAFT_FIELDS: tuple[str, ...] = (
    "title",
    "category",
    "price",
    "currency",
    "unit",
    "stock",
    "min_order_qty",
    "keywords",
    "image_urls",
    "short_description",
    "description",
    "features",
    "packaging",
    "lead_time",
)

DEFAULT_CURRENCY = "INR"
DEFAULT_UNIT = "Unit"


class ProductDraft(CamelSchema):
    """
    Operator-entered product record.

    keywords: comma-separated
    image_urls, features: one entry per line
    """

    title: str = Field("", description="Product name shown on the catalogue")
    category: str = Field("", description="Catalogue category")
    price: str = Field("", description="Unit price as typed")
    currency: str = Field(DEFAULT_CURRENCY, description="ISO currency code")
    unit: str = Field(DEFAULT_UNIT, description="Selling unit (Roll, Piece, ...)")
    stock: str = Field("", description="Available stock / supply ability")
    min_order_qty: str = Field("", description="Minimum order quantity")
    keywords: str = Field("", description="Comma-separated search keywords")
    image_urls: str = Field("", description="Image URLs, one per line")
    short_description: str = Field("", description="One-line summary")
    description: str = Field("", description="Long description")
    features: str = Field("", description="Key features, one per line")
    packaging: str = Field("", description="Packaging details")
    lead_time: str = Field("", description="Delivery lead time")

    @field_validator("*", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        """Treat null fields from the console as empty text."""
        return "" if value is None else value


class NormalizedProduct(CamelSchema):
    """
    Draft with list-like fields exploded.

    List fields hold trimmed, non-empty entries in their original order and
    are never null.
    """

    title: str = ""
    category: str = ""
    price: str = ""
    currency: str = ""
    unit: str = ""
    stock: str = ""
    min_order_qty: str = ""
    keywords: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    short_description: str = ""
    description: str = ""
    features: list[str] = Field(default_factory=list)
    packaging: str = ""
    lead_time: str = ""

    @field_validator("keywords", "image_urls", "features", mode="before")
    @classmethod
    def none_to_list(cls, value):
        return [] if value is None else value

    @field_validator(
        "title", "category", "price", "currency", "unit", "stock",
        "min_order_qty", "short_description", "description", "packaging",
        "lead_time",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value


class DescriptionSuggestion(CamelSchema):
    """Generated copy for a draft."""

    short_description: str
    description: str
