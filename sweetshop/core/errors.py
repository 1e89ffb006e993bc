"""Service error taxonomy. Each error carries the HTTP status it maps to."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One offending input field and a human-readable reason."""

    field: str
    message: str


class ServiceError(Exception):
    """Base class for errors raised by stores and operations."""

    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ValidationError(ServiceError):
    """Malformed or out-of-range input; lists every failing field."""

    status_code = 400

    def __init__(
        self,
        errors: list[FieldError],
        message: str = "Validation failed",
    ) -> None:
        self.errors = errors
        super().__init__(message)


class Unauthenticated(ServiceError):
    status_code = 401


class Forbidden(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    status_code = 409


class BusinessRuleViolation(ServiceError):
    """Well-formed request that the current state does not allow (e.g. no stock)."""

    status_code = 400


class InternalError(ServiceError):
    """Unexpected storage or infrastructure failure. Message stays generic."""

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause)
