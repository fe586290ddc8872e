"""
Error handling utilities for Lambda resolvers.

Provides standardized error responses with error codes and the error
taxonomy shared by the store, authorization and OAuth layers.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Application error with error code and message.

    Used to return structured errors to GraphQL clients.
    """

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for GraphQL response."""
        return {
            "errorCode": self.error_code,
            "message": self.message,
            **self.details,
        }


# Common error codes
class ErrorCode:
    """Standard error codes for the application."""

    # Authorization errors
    UNAUTHORIZED = "UNAUTHORIZED"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    IMMUTABLE_FIELD = "IMMUTABLE_FIELD"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Identity provider errors
    MISSING_CODE = "MISSING_CODE"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class NotFoundError(AppError):
    """Requested record does not exist."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorCode.NOT_FOUND, message, details)


class ValidationError(AppError):
    """Malformed input, disallowed mutation or missing required reference."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = ErrorCode.INVALID_INPUT,
    ):
        super().__init__(error_code, message, details)


class ImmutableFieldError(ValidationError):
    """Attempt to change a primary key or another field fixed at creation."""

    def __init__(self, record_type: str, field: str):
        self.field = field
        super().__init__(
            f"{field} cannot be updated on {record_type}",
            {"field": field},
            error_code=ErrorCode.IMMUTABLE_FIELD,
        )


class AlreadyExistsError(ValidationError):
    """A record with the same key or unique attribute already exists."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, error_code=ErrorCode.ALREADY_EXISTS)


class UnauthorizedError(AppError):
    """
    Caller may not perform the operation.

    The message is always the same so callers cannot tell a missing session
    from an invalid one.
    """

    def __init__(self) -> None:
        super().__init__(ErrorCode.UNAUTHORIZED, "Unauthorized")


class MissingCodeError(ValidationError):
    """OAuth exchange attempted without an authorization code."""

    def __init__(self) -> None:
        super().__init__("code must be a string", error_code=ErrorCode.MISSING_CODE)


class ProviderError(AppError):
    """Identity provider answered with an error payload."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(ErrorCode.PROVIDER_ERROR, f"Identity provider error: {description}")


class TransportError(AppError):
    """Network or transport failure talking to the store or identity provider."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.TRANSPORT_ERROR, message)


def handle_error(error: Exception) -> Dict[str, Any]:
    """
    Convert exception to standardized error response.

    Args:
        error: Exception to handle

    Returns:
        Error dictionary for GraphQL response
    """
    if isinstance(error, AppError):
        return error.to_dict()

    # Unexpected error - return generic message
    return {
        "errorCode": ErrorCode.INTERNAL_ERROR,
        "message": "An unexpected error occurred. Please try again.",
    }
