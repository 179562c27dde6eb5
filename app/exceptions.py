from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Internal error"
    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is invalid or a precondition for a service call is not met
    (malformed identifier, missing field, unknown package name, too few likes to publish).
    """

    http_status = 400
    default_message = "Invalid input"
    default_code = "INVALID_INPUT"


class InvalidPaymentError(ServiceValidationError):
    """Raised when a payment confirmation payload is incomplete or names an unknown package."""

    default_message = "Missing payment info"
    default_code = "INVALID_PAYMENT"


class UnauthorizedError(AppError):
    """Raised when the bearer token is missing or cannot be verified."""

    http_status = 401
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    """Raised when a tier or role precondition fails."""

    http_status = 403
    default_message = "Forbidden"
    default_code = "FORBIDDEN"


class NotFoundError(AppError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    """Raised when an at-most-once action is repeated (duplicate like, request or payment)."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"


class UpstreamServiceError(AppError):
    """Raised when the payment processor or identity provider fails."""

    http_status = 500
    default_message = "Upstream service error"
    default_code = "UPSTREAM_ERROR"
