"""Pydantic models for Heritage booking entities."""

from .admin import AdminStats, AnalyticsReport, RevenuePoint, TicketShare, VisitorsPoint
from .booking import Booking, BookingCreate, BookingDraft, BookingOwner, TicketTypeSummary
from .enums import (
    BookingStatus,
    PaymentProvider,
    Role,
    SessionState,
    TransactionStatus,
    WizardStep,
)
from .errors import (
    AuthenticationError,
    AuthorizationError,
    ErrorCode,
    ErrorInfo,
    HeritageError,
    InvalidTransitionError,
    LoginRequiredError,
    PaymentError,
    SessionExpiredError,
    SessionNotReadyError,
    TransportError,
    ValidationError,
    translate_transport_error,
)
from .exhibit import Exhibit, ExhibitInput
from .forms import LoginForm, ProfileUpdate, RegistrationForm, parse_form
from .identity import Identity, UserRecord
from .payment import PaymentResult
from .ticket import FALLBACK_TICKET_TYPES, TicketSelection, TicketType

__all__ = [
    # Enums
    "BookingStatus",
    "PaymentProvider",
    "Role",
    "SessionState",
    "TransactionStatus",
    "WizardStep",
    # Errors
    "AuthenticationError",
    "AuthorizationError",
    "ErrorCode",
    "ErrorInfo",
    "HeritageError",
    "InvalidTransitionError",
    "LoginRequiredError",
    "PaymentError",
    "SessionExpiredError",
    "SessionNotReadyError",
    "TransportError",
    "ValidationError",
    "translate_transport_error",
    # Identity
    "Identity",
    "UserRecord",
    # Forms
    "LoginForm",
    "ProfileUpdate",
    "RegistrationForm",
    "parse_form",
    # Tickets
    "FALLBACK_TICKET_TYPES",
    "TicketSelection",
    "TicketType",
    # Bookings
    "Booking",
    "BookingCreate",
    "BookingDraft",
    "BookingOwner",
    "TicketTypeSummary",
    # Exhibits
    "Exhibit",
    "ExhibitInput",
    # Admin
    "AdminStats",
    "AnalyticsReport",
    "RevenuePoint",
    "TicketShare",
    "VisitorsPoint",
    # Payment
    "PaymentResult",
]
