"""The signed-in visitor's booking history."""

from heritage.models import Booking, TransportError, ValidationError, translate_transport_error
from heritage.utils.logging import get_logger, log_booking_operation

from .api_client import ApiClient
from .session import SessionManager

logger = get_logger(__name__)

PROFILE_PATH = "/profile"


class BookingHistory:
    """Lists and cancels the current identity's bookings."""

    def __init__(self, session: SessionManager, api: ApiClient) -> None:
        self._session = session
        self._api = api

    async def list_my_bookings(self) -> list[Booking]:
        """Get bookings for the current identity.

        Raises:
            LoginRequiredError: If no one is logged in
        """
        self._session.require_authenticated(return_to=PROFILE_PATH)
        try:
            return await self._api.get_my_bookings()
        except TransportError as e:
            raise translate_transport_error(e) from e

    async def cancel_booking(self, booking: Booking | str) -> Booking | None:
        """Cancel one of the current identity's bookings.

        Args:
            booking: The booking as listed, or its ID

        Returns:
            The updated booking when the backend returns it

        Raises:
            ValidationError: If the listed booking is already cancelled
                (no request is sent)
        """
        self._session.require_authenticated(return_to=PROFILE_PATH)
        if isinstance(booking, Booking):
            if not booking.is_cancellable:
                raise ValidationError(
                    message="This booking is already cancelled.",
                    details={"booking_id": booking.id},
                )
            booking_id = booking.id
        else:
            booking_id = booking

        try:
            updated = await self._api.cancel_booking(booking_id)
        except TransportError as e:
            log_booking_operation(logger, "cancel_booking", booking_id=booking_id, error=e.message)
            raise translate_transport_error(e) from e

        log_booking_operation(logger, "cancel_booking", booking_id=booking_id)
        return updated
