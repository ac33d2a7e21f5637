"""Domain error hierarchy rendered by the application's exception handlers."""
from __future__ import annotations


class CRMError(Exception):
    """Base error for failures surfaced to the caller."""

    status_code = 400
    code = "CRM_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(CRMError):
    """Raised when an operation runs without a current user."""

    status_code = 401
    code = "AUTHENTICATION_REQUIRED"


class ResourceNotFoundError(CRMError):
    """Raised when a record does not exist or belongs to another owner."""

    status_code = 404
    code = "RESOURCE_NOT_FOUND"


class ImportFormatError(CRMError):
    """Raised when an uploaded CSV cannot be processed at all."""

    status_code = 400
    code = "INVALID_IMPORT_FILE"


class StorageError(CRMError):
    """Raised when the object storage rejects an operation."""

    status_code = 502
    code = "STORAGE_ERROR"
