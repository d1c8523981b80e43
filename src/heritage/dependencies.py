"""Dependency providers for the client services.

This module provides factory functions for service instances using @lru_cache
so that one process shares a single API client and session. The presentation
layer takes its services from here instead of building them itself, and tests
substitute fakes by constructing services directly.

Usage:
    from heritage.dependencies import get_session_manager

    session = get_session_manager()
    await session.initialize()

Service Dependency Graph:
    ApiClient (singleton via get_api_client)
        ├── SessionManager
        │       ├── BookingHistory
        │       ├── AdminConsole
        │       └── BookingWizard (one per booking visit)
        └── Catalog
    PaymentGateway (SimulatedPaymentGateway)

Testing:
    Use reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from heritage.config import get_settings
from heritage.services.admin import AdminConsole
from heritage.services.api_client import ApiClient
from heritage.services.booking_wizard import BookingWizard
from heritage.services.bookings import BookingHistory
from heritage.services.catalog import Catalog
from heritage.services.payment_gateway import PaymentGateway, SimulatedPaymentGateway
from heritage.services.session import SessionManager
from heritage.services.token_store import FileTokenStore, InMemoryTokenStore, TokenStore
from heritage.utils.logging import configure_logging


@lru_cache
def get_token_store() -> TokenStore:
    """Get cached TokenStore instance.

    Returns:
        FileTokenStore when HERITAGE_TOKEN_FILE is set, otherwise in-memory.
    """
    settings = get_settings()
    if settings.token_file:
        return FileTokenStore(settings.token_file)
    return InMemoryTokenStore()


@lru_cache
def get_api_client() -> ApiClient:
    """Get cached ApiClient instance.

    Returns:
        ApiClient configured from settings.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    return ApiClient(
        settings.api_base_url,
        token_store=get_token_store(),
        timeout=settings.api_timeout,
    )


@lru_cache
def get_session_manager() -> SessionManager:
    """Get cached SessionManager instance.

    Returns:
        The process-wide SessionManager bound to the shared ApiClient.
    """
    return SessionManager(get_api_client())


@lru_cache
def get_catalog() -> Catalog:
    return Catalog(get_api_client())


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    """Get cached PaymentGateway instance.

    Returns:
        SimulatedPaymentGateway using HERITAGE_PAYMENT_DELAY.
    """
    return SimulatedPaymentGateway(delay_seconds=get_settings().payment_delay)


@lru_cache
def get_booking_history() -> BookingHistory:
    return BookingHistory(get_session_manager(), get_api_client())


@lru_cache
def get_admin_console() -> AdminConsole:
    return AdminConsole(get_session_manager(), get_api_client())


def create_booking_wizard() -> BookingWizard:
    """Create a BookingWizard for a new booking visit.

    Not cached: each visit to the booking page starts an empty draft.
    """
    return BookingWizard(
        session=get_session_manager(),
        api=get_api_client(),
        catalog=get_catalog(),
        payment_gateway=get_payment_gateway(),
    )


def reset_services() -> None:
    """Clear all cached service instances.

    Call this in test fixtures to ensure clean state between tests.
    Does not close the cached ApiClient; await close() on it first if
    it was used.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    get_admin_console.cache_clear()
    get_booking_history.cache_clear()
    get_payment_gateway.cache_clear()
    get_catalog.cache_clear()
    get_session_manager.cache_clear()
    get_api_client.cache_clear()
    get_token_store.cache_clear()
