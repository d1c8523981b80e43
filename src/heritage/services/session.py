"""Session manager: the single source of truth for the current identity.

Owns:
1. The active Identity (or its absence) and the session lifecycle
   (uninitialized -> loading -> ready)
2. The is_admin predicate that every admin-only operation goes through
3. Identity-mutating operations: login, register, logout, profile update
4. Admin user operations, gated client-side before any network call

The identity is a frozen snapshot replaced wholesale on every change.
Only this class writes it; any component may read it.

login() and register() are two sequential calls each (mutate, then fetch
the profile). The profile fetch depends on the session cookie set by the
first call, so the two must never be reordered or run concurrently.
"""

import asyncio
from typing import Any, Mapping, Optional

import pydantic

from heritage.models import (
    AuthenticationError,
    AuthorizationError,
    ErrorCode,
    HeritageError,
    Identity,
    LoginForm,
    LoginRequiredError,
    ProfileUpdate,
    RegistrationForm,
    SessionState,
    TransportError,
    UserRecord,
    ValidationError,
    parse_form,
    translate_transport_error,
)
from heritage.models.errors import VALIDATION_STATUSES
from heritage.utils.logging import correlation_scope, get_logger, log_session_event

from .api_client import ApiClient

logger = get_logger(__name__)

# Statuses the login endpoint uses to reject credentials
CREDENTIAL_REJECTION_STATUSES: frozenset[int] = frozenset({400, 401, 403, 404})

# Identity fields update_identity() may merge
MERGEABLE_FIELDS: frozenset[str] = frozenset({"name", "email"})


class SessionManager:
    """Process-wide session state backed by the remote API.

    Usage:
        session = SessionManager(api)
        await session.initialize()
        if session.is_admin:
            users = await session.list_users()
    """

    def __init__(self, api: ApiClient) -> None:
        """Initialize session manager.

        Args:
            api: API client; its 401 signal clears the identity
        """
        self._api = api
        self._identity: Optional[Identity] = None
        self._state = SessionState.UNINITIALIZED
        self._ready = asyncio.Event()
        api.add_unauthorized_listener(self._handle_unauthorized)

    # --- State ---

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loading(self) -> bool:
        """True only while initialize() is resolving the session."""
        return self._state == SessionState.LOADING

    @property
    def is_ready(self) -> bool:
        """True once initialize() has completed, whatever the outcome."""
        return self._state == SessionState.READY

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def is_admin(self) -> bool:
        """The single role predicate for admin-only behavior."""
        return self._identity is not None and self._identity.is_admin

    def require_authenticated(self, return_to: str) -> Identity:
        """Return the active identity or raise LoginRequiredError.

        Args:
            return_to: Where to send the user after logging in
        """
        if self._identity is None:
            raise LoginRequiredError(return_to=return_to)
        return self._identity

    def require_admin(self) -> Identity:
        """Return the active identity if it is an admin.

        Raises:
            AuthorizationError: If no identity is active or it is not an admin
        """
        identity = self._identity
        if identity is None or not identity.is_admin:
            log_session_event(
                logger,
                "admin_check",
                user_id=identity.id if identity else None,
                result="denied",
            )
            raise AuthorizationError()
        return identity

    # --- Lifecycle ---

    async def initialize(self) -> None:
        """Resolve the identity from the persisted session.

        Failure of any kind means "not logged in" and is not raised.
        Runs once; later calls wait for the first to finish.
        """
        if self._state != SessionState.UNINITIALIZED:
            await self._ready.wait()
            return

        self._state = SessionState.LOADING
        try:
            self._identity = await self._api.get_profile()
            log_session_event(
                logger,
                "initialize",
                user_id=self._identity.id,
                role=self._identity.role.value,
                result="success",
            )
        except (HeritageError, pydantic.ValidationError) as e:
            self._identity = None
            log_session_event(logger, "initialize", result="anonymous", reason=str(e))
        finally:
            self._state = SessionState.READY
            self._ready.set()

    async def wait_until_ready(self) -> None:
        """Suspend until initialize() has completed."""
        await self._ready.wait()

    # --- Authentication ---

    async def login(self, email: str, password: str) -> Identity:
        """Log in, then fetch the profile to populate the identity.

        Raises:
            ValidationError: If the form is invalid (no request is sent)
            AuthenticationError: If the backend rejects the credentials
            TransportError: On network failure
        """
        form = parse_form(LoginForm, email=email, password=password)

        with correlation_scope():
            try:
                await self._api.login(form.email, form.password)
            except TransportError as e:
                log_session_event(logger, "login", result="denied", error=e.message)
                if e.status_code in CREDENTIAL_REJECTION_STATUSES:
                    raise AuthenticationError(
                        ErrorCode.INVALID_CREDENTIALS, message=e.backend_message
                    ) from e
                raise translate_transport_error(e) from e

            return await self._load_profile("login")

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
    ) -> Identity:
        """Create an account; registration implies login.

        Raises:
            ValidationError: If the form is invalid or the backend rejects it
                (e.g., duplicate email)
            TransportError: On network failure
        """
        form = parse_form(
            RegistrationForm,
            name=username,
            email=email,
            password=password,
            confirm_password=confirm_password,
        )

        with correlation_scope():
            try:
                await self._api.register(form.name, form.email, form.password)
            except TransportError as e:
                log_session_event(logger, "register", result="denied", error=e.message)
                if e.status_code in VALIDATION_STATUSES:
                    raise ValidationError(message=e.backend_message, details=e.details) from e
                raise translate_transport_error(e) from e

            return await self._load_profile("register")

    async def _load_profile(self, event: str) -> Identity:
        try:
            identity = await self._api.get_profile()
        except TransportError as e:
            log_session_event(logger, event, result="error", error=e.message)
            raise translate_transport_error(e) from e

        self._identity = identity
        if self._state == SessionState.UNINITIALIZED:
            # A fresh login resolves the session as well
            self._state = SessionState.READY
            self._ready.set()
        log_session_event(
            logger, event, user_id=identity.id, role=identity.role.value, result="success"
        )
        return identity

    def logout(self) -> None:
        """Clear the identity and credentials immediately.

        Nothing is awaited, so the UI reflects the logged-out state at once.
        """
        previous = self._identity
        self._identity = None
        self._api.clear_credentials()
        log_session_event(
            logger, "logout", user_id=previous.id if previous else None, result="success"
        )

    # --- Profile ---

    def update_identity(self, partial: Mapping[str, Any]) -> Optional[Identity]:
        """Shallow-merge name/email into the identity without a network call.

        Used to reflect a profile update the server already confirmed.
        No-op without an active identity.

        Args:
            partial: Fields to merge; keys other than name and email are ignored

        Returns:
            The updated identity, or None if no identity is active
        """
        if self._identity is None:
            return None

        update = {
            key: value
            for key, value in partial.items()
            if key in MERGEABLE_FIELDS and value is not None
        }
        if update:
            self._identity = self._identity.model_copy(update=update)
        return self._identity

    async def update_profile(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Identity:
        """Update the profile on the server, then merge it locally.

        Raises:
            LoginRequiredError: If no identity is active
            ValidationError: If the form is invalid or rejected by the backend
        """
        current = self.require_authenticated(return_to="/profile")
        update = parse_form(ProfileUpdate, name=name, email=email, password=password)

        with correlation_scope():
            try:
                await self._api.update_profile(update)
            except TransportError as e:
                raise translate_transport_error(e) from e

            identity = self.update_identity({"name": update.name, "email": update.email}) or current
            log_session_event(logger, "update_profile", user_id=identity.id, result="success")
        return identity

    # --- Admin ---

    async def list_users(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> list[UserRecord]:
        """List users (admin only)."""
        self.require_admin()
        try:
            return await self._api.admin_list_users(page=page, limit=limit)
        except TransportError as e:
            raise translate_transport_error(e) from e

    async def delete_user(self, user_id: str) -> None:
        """Delete a user account (admin only)."""
        admin = self.require_admin()
        try:
            await self._api.admin_delete_user(user_id)
        except TransportError as e:
            raise translate_transport_error(e) from e
        log_session_event(logger, "delete_user", user_id=admin.id, target=user_id, result="success")

    async def promote_to_admin(self, user_id: str) -> None:
        """Grant the admin role to a user (admin only)."""
        admin = self.require_admin()
        try:
            await self._api.admin_promote_user(user_id)
        except TransportError as e:
            raise translate_transport_error(e) from e
        log_session_event(
            logger, "promote_user", user_id=admin.id, target=user_id, result="success"
        )

    # --- Cross-cutting ---

    def _handle_unauthorized(self) -> None:
        if self._identity is None:
            return
        log_session_event(logger, "session_expired", user_id=self._identity.id, result="denied")
        self._identity = None
