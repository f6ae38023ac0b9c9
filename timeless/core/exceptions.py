"""Custom exceptions for the Timeless application."""


class TimelessException(Exception):
    """Base exception for Timeless application."""

    status_code = 500
    error_code = "INTERNAL_ERROR"


class ValidationError(TimelessException):
    """Raised when validation fails."""

    status_code = 422
    error_code = "VALIDATION_ERROR"


class NotFoundError(TimelessException):
    """Raised when a resource is not found."""

    status_code = 404
    error_code = "NOT_FOUND"


class ConfigurationError(TimelessException):
    """Raised when configuration is invalid."""


class AuthenticationError(TimelessException):
    """Raised when authentication fails."""

    status_code = 401
    error_code = "AUTHENTICATION_FAILED"


class AuthorizationError(TimelessException):
    """Raised when an authenticated caller lacks permission."""

    status_code = 403
    error_code = "FORBIDDEN"


class UnauthorizedActionError(AuthorizationError):
    """Raised when a user is not a party to a deal or their role may not make the move."""

    error_code = "UNAUTHORIZED_ACTION"

    def __init__(self, message: str = "Action not allowed.") -> None:
        super().__init__(message)


class InvalidStateTransitionError(TimelessException):
    """Raised when a deal cannot move from its current state to the requested one."""

    status_code = 409
    error_code = "INVALID_STATE_TRANSITION"

    def __init__(self, message: str = "Deal state changed, please refresh.") -> None:
        super().__init__(message)


class ChatClosedError(TimelessException):
    """Raised when a message is sent on a deal that reached a terminal state."""

    status_code = 409
    error_code = "CHAT_READ_ONLY"
