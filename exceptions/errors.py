"""
Custom exception classes for the application.

Every error that can surface from the queue, the CSV importer or the
IndiaMART gateway derives from AppError so routes and the queue runner
handle them uniformly.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "MISSING_TITLE")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class BadRequestError(AppError):
    """Request cannot be processed as sent (400)."""

    def __init__(
        self,
        message: str,
        code: str = "BAD_REQUEST",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details
        )


# ===================
# DRAFT ERRORS
# ===================

class MissingTitleError(ValidationError):
    """Draft has no title and cannot be queued."""

    def __init__(self):
        super().__init__(
            code="MISSING_TITLE",
            message="Add a product title before queuing.",
            details={"field": "title"}
        )


# ===================
# CSV ERRORS
# ===================

class SchemaError(ValidationError):
    """CSV header does not match the import template. Nothing is imported."""

    def __init__(self, missing_columns: list[str], message: Optional[str] = None):
        self.missing_columns = list(missing_columns)
        super().__init__(
            code="CSV_SCHEMA_MISMATCH",
            message=message or f"Missing columns: {', '.join(self.missing_columns)}",
            details={"missing_columns": self.missing_columns}
        )


class CsvExportError(ValidationError):
    """A draft cannot be written to the line-based CSV format."""

    def __init__(self, problems: list[dict]):
        super().__init__(
            code="CSV_EXPORT_MULTILINE",
            message=f"{len(problems)} field(s) contain line breaks and cannot be exported",
            details={"problems": problems}
        )


# ===================
# SUBMISSION ERRORS
# ===================

class MalformedRequestError(BadRequestError):
    """Request body could not be parsed."""

    def __init__(self, message: str = "Invalid JSON payload received.", details: Optional[dict] = None):
        super().__init__(
            code="MALFORMED_REQUEST",
            message=message,
            details=details
        )


class MissingFieldsError(BadRequestError):
    """Product is missing fields the catalogue requires."""

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(
            code="MISSING_PRODUCT_FIELDS",
            message=f"Missing required product fields: {', '.join(self.fields)}",
            details={"fields": self.fields}
        )


class MissingCredentialsError(BadRequestError):
    """Live mode was requested without an API key or seller ID."""

    def __init__(self, credential: str):
        labels = {"api_key": "API key", "seller_id": "Seller ID"}
        super().__init__(
            code="MISSING_CREDENTIALS",
            message=f"{labels.get(credential, credential)} is required in live mode.",
            details={"credential": credential}
        )


class RemoteRejectedError(AppError):
    """Catalogue API answered with a non-2xx status (502)."""

    def __init__(self, remote_status: int, response: Any):
        self.remote_status = remote_status
        self.response = response
        super().__init__(
            code="REMOTE_REJECTED",
            message="IndiaMART API returned an error.",
            status_code=502,
            details={"status": remote_status, "response": response}
        )


class RemoteUnreachableError(AppError):
    """Catalogue API could not be reached (504)."""

    def __init__(self, message: str):
        super().__init__(
            code="REMOTE_UNREACHABLE",
            message=message or "Unexpected error while reaching IndiaMART.",
            status_code=504,
            details={}
        )
