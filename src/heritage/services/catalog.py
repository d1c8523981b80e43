"""Public catalog reads: ticket types and exhibits."""

from typing import Optional

from heritage.models import (
    FALLBACK_TICKET_TYPES,
    Exhibit,
    TicketType,
    TransportError,
    translate_transport_error,
)
from heritage.utils.logging import get_logger

from .api_client import ApiClient

logger = get_logger(__name__)


class Catalog:
    """Read-only access to the ticket and exhibit catalog."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def get_ticket_types(self) -> list[TicketType]:
        """Get purchasable ticket types.

        Falls back to the static set when the backend is unreachable,
        answers with an error, or has no ticket types configured.

        Returns:
            Ticket types in catalog order
        """
        try:
            ticket_types = await self._api.get_ticket_types()
        except TransportError as e:
            logger.info("Using fallback ticket types: %s", e.message)
            return list(FALLBACK_TICKET_TYPES)

        if not ticket_types:
            logger.info("Using fallback ticket types: catalog is empty")
            return list(FALLBACK_TICKET_TYPES)
        return ticket_types

    async def list_exhibits(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[Exhibit]:
        try:
            return await self._api.list_exhibits(page=page, limit=limit, search=search)
        except TransportError as e:
            raise translate_transport_error(e) from e

    async def get_exhibit(self, exhibit_id: str) -> Exhibit:
        try:
            return await self._api.get_exhibit(exhibit_id)
        except TransportError as e:
            raise translate_transport_error(e) from e
