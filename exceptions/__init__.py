"""
Custom exceptions module.

Re-exports the error taxonomy used by routes, the CSV importer,
the queue runner and the IndiaMART gateway.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,
    BadRequestError,

    # Drafts
    MissingTitleError,

    # CSV
    SchemaError,
    CsvExportError,

    # Submission
    MalformedRequestError,
    MissingFieldsError,
    MissingCredentialsError,
    RemoteRejectedError,
    RemoteUnreachableError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",
    "BadRequestError",

    # Drafts
    "MissingTitleError",

    # CSV
    "SchemaError",
    "CsvExportError",

    # Submission
    "MalformedRequestError",
    "MissingFieldsError",
    "MissingCredentialsError",
    "RemoteRejectedError",
    "RemoteUnreachableError",
]
