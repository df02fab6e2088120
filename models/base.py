"""
Base schemas for all models.

The console front end speaks camelCase JSON (minOrderQty, imageUrls, ...);
Python code uses snake_case attributes. CamelSchema bridges the two.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )


class CamelSchema(BaseSchema):
    """
    Base for schemas exchanged with the console.

    Accepts both camelCase (wire) and snake_case (Python) field names,
    serializes with camelCase when dumped by_alias.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Dump as camelCase JSON-compatible dict."""
        return self.model_dump(by_alias=True, mode="json")
