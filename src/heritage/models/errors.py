"""Standard error codes and exceptions for the booking client.

Every failure that leaves the session manager, the booking wizard or the
client services is one of the HeritageError subclasses below. Raw httpx
errors are normalized to TransportError by the API client and translated
at the service boundary with translate_transport_error().
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    # Authentication error codes (ERR_AUTH_001-ERR_AUTH_005)
    INVALID_CREDENTIALS = "ERR_AUTH_001"
    LOGIN_REQUIRED = "ERR_AUTH_002"
    SESSION_EXPIRED = "ERR_AUTH_003"
    ADMIN_REQUIRED = "ERR_AUTH_004"
    SESSION_LOADING = "ERR_AUTH_005"

    # Booking error codes (ERR_BOOK_001-ERR_BOOK_007)
    INVALID_INPUT = "ERR_BOOK_001"
    DATE_IN_PAST = "ERR_BOOK_002"
    DATE_REQUIRED = "ERR_BOOK_003"
    TICKETS_REQUIRED = "ERR_BOOK_004"
    UNKNOWN_TICKET_TYPE = "ERR_BOOK_005"
    INVALID_TRANSITION = "ERR_BOOK_006"
    PAYMENT_FAILED = "ERR_BOOK_007"

    # Transport error codes (ERR_NET_001-ERR_NET_003)
    NETWORK_ERROR = "ERR_NET_001"
    BACKEND_ERROR = "ERR_NET_002"
    MALFORMED_RESPONSE = "ERR_NET_003"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    # Authentication errors
    ErrorCode.INVALID_CREDENTIALS: "Invalid credentials. Please try again.",
    ErrorCode.LOGIN_REQUIRED: "Please login to continue.",
    ErrorCode.SESSION_EXPIRED: "Your session has expired.",
    ErrorCode.ADMIN_REQUIRED: "Admins only",
    ErrorCode.SESSION_LOADING: "Session is still loading",
    # Booking errors
    ErrorCode.INVALID_INPUT: "The submitted data is invalid",
    ErrorCode.DATE_IN_PAST: "Visit date cannot be in the past",
    ErrorCode.DATE_REQUIRED: "Please select a visit date.",
    ErrorCode.TICKETS_REQUIRED: "Please select at least one ticket.",
    ErrorCode.UNKNOWN_TICKET_TYPE: "Unknown ticket type",
    ErrorCode.INVALID_TRANSITION: "This action is not available at the current booking step",
    ErrorCode.PAYMENT_FAILED: "There was an error processing your payment.",
    # Transport errors
    ErrorCode.NETWORK_ERROR: "Could not reach the server",
    ErrorCode.BACKEND_ERROR: "The server could not complete the request",
    ErrorCode.MALFORMED_RESPONSE: "The server returned an unexpected response",
}

# Recovery suggestions shown alongside the message
ERROR_RECOVERY: dict[ErrorCode, str] = {
    # Authentication error recovery
    ErrorCode.INVALID_CREDENTIALS: "Re-enter your email and password",
    ErrorCode.LOGIN_REQUIRED: "Login and you will be returned here",
    ErrorCode.SESSION_EXPIRED: "Login again to continue",
    ErrorCode.ADMIN_REQUIRED: "Ask an administrator for access",
    ErrorCode.SESSION_LOADING: "Wait for the session to finish loading",
    # Booking error recovery
    ErrorCode.INVALID_INPUT: "Correct the highlighted fields and try again",
    ErrorCode.DATE_IN_PAST: "Choose today or a later date",
    ErrorCode.DATE_REQUIRED: "Pick a date from the calendar",
    ErrorCode.TICKETS_REQUIRED: "Add at least one ticket",
    ErrorCode.UNKNOWN_TICKET_TYPE: "Reload the ticket list",
    ErrorCode.INVALID_TRANSITION: "Wait for the current step to finish",
    ErrorCode.PAYMENT_FAILED: "Please try again",
    # Transport error recovery
    ErrorCode.NETWORK_ERROR: "Check your connection and try again",
    ErrorCode.BACKEND_ERROR: "Please try again later",
    ErrorCode.MALFORMED_RESPONSE: "Please try again later",
}


class ErrorInfo(BaseModel):
    """Display-ready error payload for the presentation layer."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None


class HeritageError(Exception):
    """Base exception for the booking client.

    Carries an ErrorCode with its default message and recovery hint. A
    message supplied by the backend replaces the default message verbatim.
    """

    default_code = ErrorCode.BACKEND_ERROR

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code or self.default_code
        self.message = message or ERROR_MESSAGES[self.code]
        self.recovery = ERROR_RECOVERY[self.code]
        self.details = details
        super().__init__(self.message)

    def to_error_info(self) -> ErrorInfo:
        """Convert this exception to an ErrorInfo for display."""
        return ErrorInfo(
            error_code=self.code,
            message=self.message,
            recovery=self.recovery,
            details=self.details,
        )


class AuthenticationError(HeritageError):
    """Credentials were rejected or authentication is required."""

    default_code = ErrorCode.INVALID_CREDENTIALS


class LoginRequiredError(AuthenticationError):
    """Raised when an action needs a logged-in identity.

    Carries where to send the user and where to return them afterwards.
    """

    default_code = ErrorCode.LOGIN_REQUIRED

    def __init__(
        self,
        return_to: str,
        login_path: str = "/login",
        message: Optional[str] = None,
    ):
        self.return_to = return_to
        self.login_path = login_path
        super().__init__(message=message, details={"return_to": return_to})


class SessionExpiredError(AuthenticationError):
    """A request was rejected with 401 outside the login flow."""

    default_code = ErrorCode.SESSION_EXPIRED


class AuthorizationError(HeritageError):
    """The identity lacks the role required for the operation."""

    default_code = ErrorCode.ADMIN_REQUIRED


class ValidationError(HeritageError):
    """Input was malformed or rejected. Always locally recoverable."""

    default_code = ErrorCode.INVALID_INPUT


class InvalidTransitionError(ValidationError):
    """The booking wizard cannot perform the action in its current step."""

    default_code = ErrorCode.INVALID_TRANSITION


class PaymentError(HeritageError):
    """The payment step failed; the wizard stays at the payment step."""

    default_code = ErrorCode.PAYMENT_FAILED


class SessionNotReadyError(HeritageError):
    """A role-dependent decision was requested before the session resolved."""

    default_code = ErrorCode.SESSION_LOADING


class TransportError(HeritageError):
    """Network failure, non-2xx response or undecodable body."""

    default_code = ErrorCode.BACKEND_ERROR

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        backend_message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        self.backend_message = backend_message
        super().__init__(code=code, message=backend_message, details=details)


# Backend status codes meaning "your input was rejected"
VALIDATION_STATUSES: frozenset[int] = frozenset({400, 409, 422})


def translate_transport_error(error: TransportError) -> HeritageError:
    """Map a TransportError onto the client error taxonomy by status code.

    Args:
        error: Normalized transport error

    Returns:
        SessionExpiredError for 401, AuthorizationError for 403,
        ValidationError for 400/409/422, otherwise the original error.
    """
    if error.status_code == 401:
        return SessionExpiredError(message=error.backend_message, details=error.details)
    if error.status_code == 403:
        return AuthorizationError(message=error.backend_message, details=error.details)
    if error.status_code in VALIDATION_STATUSES:
        return ValidationError(message=error.backend_message, details=error.details)
    return error
