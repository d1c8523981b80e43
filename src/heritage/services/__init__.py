"""Client services for the Heritage Museum booking app."""

from .admin import AdminConsole
from .api_client import ApiClient
from .booking_wizard import BookingWizard
from .bookings import BookingHistory
from .catalog import Catalog
from .payment_gateway import PaymentGateway, SimulatedPaymentGateway
from .routing import RouteAccess, RouteAction, RouteDecision, guard_route
from .session import SessionManager
from .token_store import FileTokenStore, InMemoryTokenStore, TokenStore

__all__ = [
    "AdminConsole",
    "ApiClient",
    "BookingHistory",
    "BookingWizard",
    "Catalog",
    "FileTokenStore",
    "InMemoryTokenStore",
    "PaymentGateway",
    "RouteAccess",
    "RouteAction",
    "RouteDecision",
    "SessionManager",
    "SimulatedPaymentGateway",
    "TokenStore",
    "guard_route",
]
