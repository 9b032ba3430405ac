"""Domain error codes and exceptions.

Every error carries a code from ``ErrorCode`` and a user-safe message. The API
layer renders them as ``{"success": false, "error": {"code", "message"}}``.
"""
import enum
from typing import Optional


class ErrorCode(str, enum.Enum):
    required_field_missing = "REQUIRED_FIELD_MISSING"
    invalid_format = "INVALID_FORMAT"
    empty_collection = "EMPTY_COLLECTION"
    duplicate_key = "DUPLICATE_KEY"
    invalid_reference = "INVALID_REFERENCE"
    dangling_reference = "DANGLING_REFERENCE"
    not_found = "NOT_FOUND"
    missing_slug = "MISSING_SLUG"
    invalid_slug = "INVALID_SLUG"
    internal_server_error = "INTERNAL_SERVER_ERROR"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.internal_server_error
    status_code: int = 400

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_body(self) -> dict:
        return {"success": False, "error": {"code": self.code.value, "message": self.message}}


class ValidationError(DomainError):
    """Rejected write. Never retried."""


class RequiredFieldMissing(ValidationError):
    code = ErrorCode.required_field_missing

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' is required.", field=field)


class InvalidFormat(ValidationError):
    code = ErrorCode.invalid_format


class EmptyCollection(ValidationError):
    code = ErrorCode.empty_collection

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' must contain at least one item.", field=field)


class DuplicateKey(ValidationError):
    code = ErrorCode.duplicate_key
    status_code = 409


class InvalidReference(ValidationError):
    code = ErrorCode.invalid_reference


class DanglingReference(ValidationError):
    code = ErrorCode.dangling_reference
    status_code = 422


class NotFound(DomainError):
    code = ErrorCode.not_found
    status_code = 404


class InfrastructureError(DomainError):
    """Internal failure. Details are logged, never sent to the caller."""

    status_code = 500

    def to_body(self) -> dict:
        return {
            "success": False,
            "error": {"code": self.code.value, "message": "An unexpected error occurred."},
        }


class ConfigurationError(InfrastructureError):
    """Required configuration is missing. Not retryable."""


class ConnectionFailure(InfrastructureError):
    """The database could not be reached. The next call retries from scratch."""
