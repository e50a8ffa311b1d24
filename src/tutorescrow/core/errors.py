"""Custom exceptions and error response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        """Convert to API response schema."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details if self.details else None,
        )


class ValidationError(AppError):
    """Raised when input validation fails (empty text, bad amount, rating out of range)."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class NotFoundError(AppError):
    """Raised when resource doesn't exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} with ID {resource_id} not found",
            status_code=404,
            details={"resource": resource, "resource_id": resource_id},
        )


class UnauthorizedError(AppError):
    """Raised when the caller does not hold the role an operation requires."""

    def __init__(self, message: str = "Unauthorized", details: Optional[dict] = None):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=403,
            details=details,
        )


class InvalidStateError(AppError):
    """Raised when operation conflicts with resource state."""

    code = "INVALID_STATE"

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code=type(self).code,
            message=message,
            status_code=409,
            details=details,
        )


class InvalidBookingError(InvalidStateError):
    """Teacher slot filled when it must be empty, or empty when it must be filled."""

    code = "INVALID_BOOKING"


class InvalidTeacherError(InvalidStateError):
    """The booking student tried to take the teacher role."""

    code = "INVALID_TEACHER"


class InvalidSessionError(InvalidStateError):
    """Session is not in the state the operation requires."""

    code = "INVALID_SESSION"


class AlreadyResolvedError(InvalidStateError):
    """Resolve attempted on a session with no open dispute."""

    code = "ALREADY_RESOLVED"


class NotBookedError(InvalidStateError):
    """Feedback or rating given on a session that is not scheduled."""

    code = "NOT_BOOKED"


class InvalidWithdrawalError(InvalidStateError):
    """Refund requested once the teacher has committed or a dispute is open."""

    code = "INVALID_WITHDRAWAL"


class DeadlinePassedError(InvalidStateError):
    """Deadline-gated operation attempted at or after the session deadline."""

    code = "DEADLINE_PASSED"


class FundsCapExceededError(InvalidStateError):
    """Deposit would push the escrow balance above the configured maximum."""

    code = "FUNDS_CAP_EXCEEDED"
