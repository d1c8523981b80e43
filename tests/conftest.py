"""Pytest configuration and fixtures for Heritage booking client tests.

This module provides reusable fixtures for testing:
- A fake museum backend served through httpx.MockTransport
- API client, session and wizard fixtures wired to the fake backend
- Sample payloads (profiles, ticket types, bookings)
"""

import inspect
import json
from datetime import date
from decimal import Decimal
from typing import Any, AsyncGenerator, Callable, Generator, Union

import httpx
import pytest

from heritage.config import reset_settings
from heritage.dependencies import reset_services
from heritage.models import PaymentResult
from heritage.services.api_client import ApiClient
from heritage.services.booking_wizard import BookingWizard
from heritage.services.catalog import Catalog
from heritage.services.payment_gateway import SimulatedPaymentGateway
from heritage.services.session import SessionManager
from heritage.utils.logging import clear_correlation_id

# === Test Configuration ===

BASE_URL = "https://api.heritage.test"
TODAY = date(2030, 1, 15)

HERITAGE_ENV_VARS = (
    "HERITAGE_API_BASE_URL",
    "HERITAGE_API_TIMEOUT",
    "HERITAGE_TOKEN_FILE",
    "HERITAGE_PAYMENT_DELAY",
    "HERITAGE_LOG_LEVEL",
)

USER_PROFILE: dict[str, Any] = {
    "_id": "u-100",
    "userName": "Ada Lovelace",
    "email": "ada@museum.org",
    "role": "user",
}

ADMIN_PROFILE: dict[str, Any] = {
    "_id": "u-900",
    "name": "Grace Hopper",
    "email": "grace@museum.org",
    "role": "admin",
}

TICKET_TYPES: list[dict[str, Any]] = [
    {"_id": "adult", "name": "Adult", "price": 25, "description": "Ages 18+"},
    {"_id": "child", "name": "Child", "price": 12, "description": "Ages 3-17"},
    {"_id": "student", "name": "Student", "price": 15, "description": "With valid ID"},
]


def booking_payload(**overrides: Any) -> dict[str, Any]:
    """Booking as returned by the backend."""
    payload: dict[str, Any] = {
        "_id": "b-1",
        "user": USER_PROFILE["_id"],
        "ticketType": "adult",
        "quantity": 3,
        "visitDate": "2030-02-01T00:00:00.000Z",
        "totalPrice": 62,
        "status": "confirmed",
        "createdAt": "2030-01-15T09:30:00.000Z",
    }
    payload.update(overrides)
    return payload


# === Fake Backend ===

ResponseSpec = Union[tuple[int, Any], Callable[[httpx.Request], Any]]


class FakeBackend:
    """In-process stand-in for the museum REST API.

    Routes map (method, path) to a list of response specs. A spec is either
    a (status, json_body) tuple or a callable taking the request and
    returning an httpx.Response (sync or async). Specs are consumed in
    order; the last one keeps answering. Unknown routes answer 404.

    Usage:
        backend.on("GET", "/profile", (200, USER_PROFILE))
        backend.on("POST", "/bookings", (500, {"message": "boom"}), (201, booking_payload()))
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], list[ResponseSpec]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *responses: ResponseSpec) -> None:
        self._routes[(method.upper(), path)] = list(responses)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        specs = self._routes.get((request.method, request.url.path))
        if not specs:
            return httpx.Response(404, json={"message": "Not found"})

        spec = specs.pop(0) if len(specs) > 1 else specs[0]
        if callable(spec):
            result = spec(request)
            if inspect.isawaitable(result):
                result = await result
            return result

        status, body = spec
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def calls(self, method: str | None = None, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]

    def call_log(self) -> list[str]:
        """Requests as 'METHOD /path' strings, in order."""
        return [f"{r.method} {r.url.path}" for r in self.requests]


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


class RecordingGateway(SimulatedPaymentGateway):
    """Simulated gateway that remembers every charge attempt."""

    def __init__(self, succeed: bool = True) -> None:
        super().__init__(delay_seconds=0, succeed=succeed)
        self.charges: list[tuple[Decimal, str]] = []

    async def charge(self, amount: Decimal, *, reference: str) -> PaymentResult:
        self.charges.append((amount, reference))
        return await super().charge(amount, reference=reference)


# === Environment Fixtures ===


@pytest.fixture(autouse=True)
def reset_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Give every test a clean environment, settings cache and service cache."""
    for var in HERITAGE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    reset_services()
    clear_correlation_id()
    yield
    reset_settings()
    reset_services()
    clear_correlation_id()


# === Service Fixtures ===


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def api(backend: FakeBackend) -> AsyncGenerator[ApiClient, None]:
    """ApiClient wired to the fake backend."""
    client = ApiClient(BASE_URL, transport=httpx.MockTransport(backend.handler))
    yield client
    await client.close()


@pytest.fixture
def session(api: ApiClient) -> SessionManager:
    return SessionManager(api)


@pytest.fixture
async def user_session(backend: FakeBackend, session: SessionManager) -> SessionManager:
    """Session resolved to a regular user."""
    backend.on("GET", "/profile", (200, USER_PROFILE))
    await session.initialize()
    return session


@pytest.fixture
async def admin_session(backend: FakeBackend, session: SessionManager) -> SessionManager:
    """Session resolved to an admin."""
    backend.on("GET", "/profile", (200, {"user": ADMIN_PROFILE}))
    await session.initialize()
    return session


@pytest.fixture
async def anonymous_session(backend: FakeBackend, session: SessionManager) -> SessionManager:
    """Session resolved with no one logged in."""
    backend.on("GET", "/profile", (401, {"message": "Not authenticated"}))
    await session.initialize()
    return session


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def catalog(api: ApiClient) -> Catalog:
    return Catalog(api)


@pytest.fixture
async def wizard(
    backend: FakeBackend,
    user_session: SessionManager,
    api: ApiClient,
    catalog: Catalog,
    gateway: RecordingGateway,
) -> BookingWizard:
    """Wizard for a logged-in user with the sample ticket catalog loaded."""
    backend.on("GET", "/tickets", (200, TICKET_TYPES))
    wizard = BookingWizard(user_session, api, catalog, gateway, today=lambda: TODAY)
    await wizard.load_ticket_types()
    return wizard
