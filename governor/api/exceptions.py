"""API exception hierarchy.

All API exceptions inherit from GovernorAPIError, whose status_code and
error_code drive the global exception handler.
"""

from governor.api.models.errors import ErrorCode


class GovernorAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(GovernorAPIError):
    """Raised when a request is well-formed but cannot be honoured."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class NotFoundError(GovernorAPIError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND


class StoreUnavailableError(GovernorAPIError):
    """Raised when a backing store cannot be reached."""

    status_code = 503
    error_code = ErrorCode.STORE_UNAVAILABLE
