"""
Custom exception hierarchy for the evaluation service.
Provides structured error handling with proper HTTP status codes.
"""

from typing import Any, Optional


class EvaluationServiceError(Exception):
    """Base exception for all evaluation service errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None,
        status_code: int = 500,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the JSON body returned to the renderer."""
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(EvaluationServiceError):
    """Request validation failed."""

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details=details,
            status_code=400,
        )


class InvalidRequestError(ValidationError):
    """A required request field is missing or unusable."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message=message)
        self.code = "INVALID_REQUEST"
        self.field = field


# =============================================================================
# Payload Errors (413)
# =============================================================================


class PayloadTooLargeError(EvaluationServiceError):
    """Request body exceeds the configured limit."""

    def __init__(self, limit_bytes: int) -> None:
        super().__init__(
            message="Request body too large",
            code="PAYLOAD_TOO_LARGE",
            status_code=413,
        )
        self.limit_bytes = limit_bytes


# =============================================================================
# Internal Errors (500)
# =============================================================================


class InternalServiceError(EvaluationServiceError):
    """Unexpected failure while building an evaluation."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            message="Internal server error",
            code="INTERNAL_ERROR",
            details=reason,
            status_code=500,
        )
