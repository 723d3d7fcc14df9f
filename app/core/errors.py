"""Jobly error hierarchy."""

from typing import Any


class JoblyError(Exception):
    """Base exception for Jobly errors."""

    code = "JOBLY_INTERNAL_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(JoblyError):
    """Invalid request parameters."""

    code = "JOBLY_BAD_REQUEST"
    status_code = 400


class EmptyInputError(ValidationError):
    """No fields or filters were supplied."""

    code = "JOBLY_EMPTY_INPUT"

    def __init__(self, message: str = "No data"):
        super().__init__(message)


class InvalidRangeError(ValidationError):
    """A minimum bound exceeds its maximum bound."""

    code = "JOBLY_INVALID_RANGE"

    def __init__(self, min_field: str, max_field: str, min_value: Any, max_value: Any):
        super().__init__(
            f"{min_field} cannot be greater than {max_field}",
            details={
                min_field: min_value,
                max_field: max_value,
            },
        )


class NotANumberError(ValidationError):
    """A numeric filter value could not be parsed."""

    code = "JOBLY_NOT_A_NUMBER"

    def __init__(self, field: str, value: Any):
        super().__init__(
            f"{field} must be a number, got {value!r}",
            details={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InvalidBooleanError(ValidationError):
    """A boolean filter value was neither true nor false."""

    code = "JOBLY_INVALID_BOOLEAN"

    def __init__(self, field: str, value: Any):
        super().__init__(
            f"{field} must be true or false, got {value!r}",
            details={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class UnauthorizedError(JoblyError):
    """Missing or insufficient credentials."""

    code = "JOBLY_UNAUTHORIZED"
    status_code = 401


class NotFoundError(JoblyError):
    """Resource not found."""

    code = "JOBLY_NOT_FOUND"
    status_code = 404


class InternalError(JoblyError):
    """Internal server error."""

    code = "JOBLY_INTERNAL_ERROR"
    status_code = 500


ERROR_STATUS_MAP: dict[type[JoblyError], int] = {
    ValidationError: 400,
    EmptyInputError: 400,
    InvalidRangeError: 400,
    NotANumberError: 400,
    InvalidBooleanError: 400,
    UnauthorizedError: 401,
    NotFoundError: 404,
    InternalError: 500,
}


def get_status_code(error: JoblyError) -> int:
    """Get HTTP status code for error."""
    return ERROR_STATUS_MAP.get(type(error), 500)
