"""Admin console data: bookings, dashboard figures and exhibit management.

User management lives on SessionManager. Every method here checks
session.require_admin() before touching the network, so a non-admin
never issues an admin request.
"""

from typing import Optional

from heritage.models import (
    AdminStats,
    AnalyticsReport,
    Booking,
    Exhibit,
    ExhibitInput,
    TransportError,
    translate_transport_error,
)
from heritage.utils.logging import get_logger

from .api_client import ApiClient
from .session import SessionManager

logger = get_logger(__name__)


class AdminConsole:
    """Admin-only reads and exhibit CRUD."""

    def __init__(self, session: SessionManager, api: ApiClient) -> None:
        self._session = session
        self._api = api

    async def list_bookings(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> list[Booking]:
        self._session.require_admin()
        try:
            return await self._api.admin_list_bookings(page=page, limit=limit)
        except TransportError as e:
            raise translate_transport_error(e) from e

    async def cancel_booking(self, booking_id: str) -> Booking | None:
        """Cancel any visitor's booking."""
        admin = self._session.require_admin()
        try:
            booking = await self._api.cancel_booking(booking_id)
        except TransportError as e:
            raise translate_transport_error(e) from e
        logger.info("Admin %s cancelled booking %s", admin.id, booking_id)
        return booking

    async def get_stats(self) -> AdminStats:
        self._session.require_admin()
        try:
            return await self._api.admin_stats()
        except TransportError as e:
            raise translate_transport_error(e) from e

    async def get_analytics(self) -> AnalyticsReport:
        self._session.require_admin()
        try:
            return await self._api.admin_analytics()
        except TransportError as e:
            raise translate_transport_error(e) from e

    # --- Exhibits ---

    async def create_exhibit(self, exhibit: ExhibitInput) -> Exhibit | None:
        """Create an exhibit.

        Args:
            exhibit: Form fields and optional image upload

        Returns:
            The created exhibit when the backend returns it
        """
        admin = self._session.require_admin()
        try:
            created = await self._api.admin_create_exhibit(exhibit)
        except TransportError as e:
            raise translate_transport_error(e) from e
        logger.info("Admin %s created exhibit %s", admin.id, exhibit.name)
        return created

    async def update_exhibit(self, exhibit_id: str, exhibit: ExhibitInput) -> Exhibit | None:
        admin = self._session.require_admin()
        try:
            updated = await self._api.admin_update_exhibit(exhibit_id, exhibit)
        except TransportError as e:
            raise translate_transport_error(e) from e
        logger.info("Admin %s updated exhibit %s", admin.id, exhibit_id)
        return updated

    async def delete_exhibit(self, exhibit_id: str) -> None:
        admin = self._session.require_admin()
        try:
            await self._api.admin_delete_exhibit(exhibit_id)
        except TransportError as e:
            raise translate_transport_error(e) from e
        logger.info("Admin %s deleted exhibit %s", admin.id, exhibit_id)
