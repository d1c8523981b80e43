"""HTTP transport for the Heritage Museum REST API.

Wraps httpx.AsyncClient to provide:
1. Base URL and JSON defaults for every call
2. Credential attachment: the session cookie rides in the cookie jar, and
   the fallback bearer token is added when no Authorization header is set
3. Error normalization: every failure surfaces as TransportError
4. A cross-cutting 401 signal: the token store is cleared and registered
   listeners are notified (the session manager clears its identity)

Endpoint paths follow the RESTful /admin/... convention. Response bodies
are accepted either bare or wrapped in a single-key object, since the
backend has shipped both shapes.
"""

from typing import Any, Callable, Optional, TypeVar

import httpx
import pydantic
from pydantic import BaseModel

from heritage.config import get_settings
from heritage.models import (
    AdminStats,
    AnalyticsReport,
    Booking,
    BookingCreate,
    ErrorCode,
    Exhibit,
    ExhibitInput,
    Identity,
    ProfileUpdate,
    TicketType,
    TransportError,
    UserRecord,
)
from heritage.utils.logging import get_correlation_id, get_logger

from .token_store import InMemoryTokenStore, TokenStore

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"

ModelT = TypeVar("ModelT", bound=BaseModel)
UnauthorizedListener = Callable[[], None]


class ApiClient:
    """Async client for the museum backend.

    Usage:
        async with ApiClient("https://api.example.com") as api:
            await api.login("ada@example.com", "secret1")
            profile = await api.get_profile()
    """

    LOGIN_PATH = "/login"
    REGISTER_PATH = "/register"
    PROFILE_PATH = "/profile"
    TICKETS_PATH = "/tickets"
    BOOKINGS_PATH = "/bookings"
    EXHIBITS_PATH = "/posts"
    ADMIN_USERS_PATH = "/admin/users"
    ADMIN_PROMOTE_PATH = "/admin/users/promote"
    ADMIN_BOOKINGS_PATH = "/admin/bookings"
    ADMIN_EXHIBITS_PATH = "/admin/posts"
    ADMIN_STATS_PATH = "/admin/stats"
    ADMIN_ANALYTICS_PATH = "/admin/analytics"

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token_store: Optional[TokenStore] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Backend base URL (defaults to HERITAGE_API_BASE_URL)
            token_store: Fallback bearer token storage (in-memory by default)
            timeout: Request timeout in seconds (defaults to HERITAGE_API_TIMEOUT)
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token_store = token_store or InMemoryTokenStore()
        self._unauthorized_listeners: list[UnauthorizedListener] = []
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=timeout if timeout is not None else settings.api_timeout,
            transport=transport,
            event_hooks={"request": [self._attach_credentials]},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # --- Credentials ---

    def add_unauthorized_listener(self, listener: UnauthorizedListener) -> None:
        """Register a callback invoked whenever any request returns 401."""
        self._unauthorized_listeners.append(listener)

    def clear_credentials(self) -> None:
        """Drop the session cookie and the fallback bearer token."""
        self._client.cookies.clear()
        self.token_store.clear()

    async def _attach_credentials(self, request: httpx.Request) -> None:
        if "Authorization" not in request.headers:
            token = self.token_store.get_token()
            if token:
                request.headers["Authorization"] = f"Bearer {token}"

        correlation_id = get_correlation_id()
        if correlation_id and CORRELATION_ID_HEADER not in request.headers:
            request.headers[CORRELATION_ID_HEADER] = correlation_id

        logger.debug("Request: %s %s", request.method, request.url.path)

    def _notify_unauthorized(self) -> None:
        self.token_store.clear()
        for listener in list(self._unauthorized_listeners):
            listener()

    # --- Request plumbing ---

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        data: Optional[dict[str, str]] = None,
        files: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None if empty).

        Raises:
            TransportError: On network failure, non-2xx status or
                undecodable body.
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params or None,
                data=data,
                files=files,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.warning("Request timed out: %s %s", method, path)
            raise TransportError(
                ErrorCode.NETWORK_ERROR, details={"path": path, "error": "timeout"}
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Request failed: %s %s - %s", method, path, e)
            raise TransportError(
                ErrorCode.NETWORK_ERROR, details={"path": path, "error": str(e)}
            ) from e

        status = response.status_code
        logger.debug("Response: %s %s -> %s", method, path, status)

        if status == 401:
            self._notify_unauthorized()

        if response.is_error:
            message = _backend_message(response)
            logger.warning("HTTP error %s: %s %s (%s)", status, method, path, message)
            raise TransportError(
                backend_message=message,
                status_code=status,
                details={"path": path, "status": str(status)},
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error("Non-JSON response from %s %s: %s", method, path, response.text[:200])
            raise TransportError(
                ErrorCode.MALFORMED_RESPONSE,
                status_code=status,
                details={"path": path},
            ) from e

    # --- Auth ---

    async def login(self, email: str, password: str) -> Any:
        """Submit credentials. The backend answers by setting the session cookie."""
        payload = await self._request(
            "POST", self.LOGIN_PATH, json={"email": email, "password": password}
        )
        self._store_token(payload)
        return payload

    async def register(self, user_name: str, email: str, password: str) -> Any:
        """Create an account. The backend logs the new user in."""
        payload = await self._request(
            "POST",
            self.REGISTER_PATH,
            json={"userName": user_name, "email": email, "password": password},
        )
        self._store_token(payload)
        return payload

    async def get_profile(self) -> Identity:
        payload = await self._request("GET", self.PROFILE_PATH)
        return _parse(Identity, _unwrap_object(payload, "user", "profile"))

    async def update_profile(self, update: ProfileUpdate) -> Any:
        return await self._request("PUT", self.PROFILE_PATH, json=update.to_payload())

    # --- Tickets ---

    async def get_ticket_types(self) -> list[TicketType]:
        payload = await self._request("GET", self.TICKETS_PATH)
        return [_parse(TicketType, item) for item in _unwrap_list(payload, "tickets", "ticketTypes")]

    async def get_ticket_type(self, ticket_type_id: str) -> TicketType:
        payload = await self._request("GET", f"{self.TICKETS_PATH}/{ticket_type_id}")
        return _parse(TicketType, _unwrap_object(payload, "ticket", "ticketType"))

    # --- Bookings ---

    async def create_booking(
        self, booking: BookingCreate, idempotency_key: Optional[str] = None
    ) -> Booking:
        headers = {IDEMPOTENCY_KEY_HEADER: idempotency_key} if idempotency_key else None
        payload = await self._request(
            "POST", self.BOOKINGS_PATH, json=booking.to_payload(), headers=headers
        )
        return _parse(Booking, _unwrap_object(payload, "booking"))

    async def get_my_bookings(self) -> list[Booking]:
        payload = await self._request("GET", self.BOOKINGS_PATH)
        return [_parse(Booking, item) for item in _unwrap_list(payload, "bookings")]

    async def cancel_booking(self, booking_id: str) -> Booking | None:
        """Cancel a booking. Returns the updated booking when the backend sends it."""
        payload = await self._request("DELETE", f"{self.BOOKINGS_PATH}/{booking_id}")
        body = _unwrap_object(payload, "booking")
        if isinstance(body, dict) and ("_id" in body or "id" in body):
            return _parse(Booking, body)
        return None

    # --- Exhibits ---

    async def list_exhibits(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[Exhibit]:
        payload = await self._request(
            "GET",
            self.EXHIBITS_PATH,
            params={"page": page, "limit": limit, "search": search},
        )
        return [_parse(Exhibit, item) for item in _unwrap_list(payload, "exhibits", "posts")]

    async def get_exhibit(self, exhibit_id: str) -> Exhibit:
        payload = await self._request("GET", f"{self.EXHIBITS_PATH}/{exhibit_id}")
        return _parse(Exhibit, _unwrap_object(payload, "exhibit", "post"))

    # --- Admin ---

    async def admin_list_users(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        role: Optional[str] = None,
    ) -> list[UserRecord]:
        payload = await self._request(
            "GET",
            self.ADMIN_USERS_PATH,
            params={"page": page, "limit": limit, "role": role},
        )
        return [_parse(UserRecord, item) for item in _unwrap_list(payload, "users")]

    async def admin_delete_user(self, user_id: str) -> None:
        await self._request("DELETE", self.ADMIN_USERS_PATH, json={"userId": user_id})

    async def admin_promote_user(self, user_id: str) -> None:
        await self._request("PUT", self.ADMIN_PROMOTE_PATH, json={"userId": user_id})

    async def admin_list_bookings(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> list[Booking]:
        payload = await self._request(
            "GET", self.ADMIN_BOOKINGS_PATH, params={"page": page, "limit": limit}
        )
        return [_parse(Booking, item) for item in _unwrap_list(payload, "bookings")]

    async def admin_stats(self) -> AdminStats:
        payload = await self._request("GET", self.ADMIN_STATS_PATH)
        return _parse(AdminStats, _unwrap_object(payload, "stats"))

    async def admin_analytics(self) -> AnalyticsReport:
        payload = await self._request("GET", self.ADMIN_ANALYTICS_PATH)
        return _parse(AnalyticsReport, _unwrap_object(payload, "analytics"))

    async def admin_create_exhibit(self, exhibit: ExhibitInput) -> Exhibit | None:
        payload = await self._request(
            "POST",
            self.ADMIN_EXHIBITS_PATH,
            data=exhibit.to_form_data(),
            files=exhibit.to_files(),
        )
        return _optional_exhibit(payload)

    async def admin_update_exhibit(self, exhibit_id: str, exhibit: ExhibitInput) -> Exhibit | None:
        payload = await self._request(
            "PUT",
            f"{self.ADMIN_EXHIBITS_PATH}/{exhibit_id}",
            data=exhibit.to_form_data(),
            files=exhibit.to_files(),
        )
        return _optional_exhibit(payload)

    async def admin_delete_exhibit(self, exhibit_id: str) -> None:
        await self._request("DELETE", f"{self.ADMIN_EXHIBITS_PATH}/{exhibit_id}")

    def _store_token(self, payload: Any) -> None:
        if isinstance(payload, dict):
            token = payload.get("token")
            if isinstance(token, str) and token:
                self.token_store.set_token(token)


def _backend_message(response: httpx.Response) -> str | None:
    """Extract the backend's `message` or `error` text, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def _unwrap_list(payload: Any, *keys: str) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in (*keys, "data"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    raise TransportError(ErrorCode.MALFORMED_RESPONSE, details={"expected": "list"})


def _unwrap_object(payload: Any, *keys: str) -> Any:
    if isinstance(payload, dict):
        for key in (*keys, "data"):
            value = payload.get(key)
            if isinstance(value, dict):
                return value
    return payload


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        logger.error("Unexpected %s payload: %s", model.__name__, e.error_count())
        raise TransportError(
            ErrorCode.MALFORMED_RESPONSE, details={"model": model.__name__}
        ) from e


def _optional_exhibit(payload: Any) -> Exhibit | None:
    body = _unwrap_object(payload, "exhibit", "post")
    if isinstance(body, dict) and ("_id" in body or "id" in body):
        return _parse(Exhibit, body)
    return None
