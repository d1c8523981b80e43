"""Booking wizard: the Selecting -> Paying -> Confirmed state machine.

Flow:
1. SELECTING: pick a visit date and ticket quantities
2. PAYING: the total is frozen; the charge runs through the PaymentGateway
3. CONFIRMED: the booking is persisted; only reset() leaves this step

PAYING -> SELECTING is allowed through go_back() unless a confirmation is
in flight. A failed charge or a rejected create leaves the wizard in PAYING
so the caller can retry. A successful charge is remembered for the draft and
the create request reuses one idempotency key, so a retry never charges
twice or creates a second booking.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from heritage.models import (
    Booking,
    BookingCreate,
    BookingDraft,
    ErrorCode,
    InvalidTransitionError,
    PaymentError,
    PaymentResult,
    SessionNotReadyError,
    TicketType,
    TransportError,
    ValidationError,
    WizardStep,
    translate_transport_error,
)
from heritage.utils.logging import correlation_scope, get_logger, log_booking_operation

from .api_client import ApiClient
from .catalog import Catalog
from .payment_gateway import PaymentGateway
from .routing import BOOKING_PATH
from .session import SessionManager

logger = get_logger(__name__)


class BookingWizard:
    """One visitor's walk through the booking flow.

    Usage:
        wizard = BookingWizard(session, api, catalog, gateway)
        await wizard.load_ticket_types()
        wizard.set_visit_date(date(2030, 5, 1))
        wizard.adjust_quantity("1", 2)
        wizard.proceed_to_payment()
        booking = await wizard.confirm_payment()
    """

    def __init__(
        self,
        session: SessionManager,
        api: ApiClient,
        catalog: Catalog,
        payment_gateway: PaymentGateway,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the wizard.

        Args:
            session: Session manager consulted for authentication
            api: API client used to persist the booking
            catalog: Source of ticket types
            payment_gateway: Charge capability for the payment step
            today: Clock for the visit date check
        """
        self._session = session
        self._api = api
        self._catalog = catalog
        self._payment_gateway = payment_gateway
        self._today = today

        self._ticket_types: list[TicketType] = []
        self._draft = BookingDraft()
        self._booking: Optional[Booking] = None
        self._payment: Optional[PaymentResult] = None
        self._idempotency_key: Optional[str] = None
        self._confirming = False

    # --- Views ---

    @property
    def step(self) -> WizardStep:
        return self._draft.step

    @property
    def draft(self) -> BookingDraft:
        """A copy of the current draft."""
        return self._draft.model_copy(deep=True)

    @property
    def ticket_types(self) -> list[TicketType]:
        return list(self._ticket_types)

    def quantity(self, ticket_type_id: str) -> int:
        return self._draft.selection.quantity(ticket_type_id)

    @property
    def ticket_count(self) -> int:
        return self._draft.selection.count

    @property
    def total_price(self) -> Decimal:
        """The frozen total while paying, otherwise the live total."""
        if self._draft.frozen_total is not None:
            return self._draft.frozen_total
        return self._draft.selection.total(self._ticket_types)

    @property
    def booking(self) -> Optional[Booking]:
        """The persisted booking once CONFIRMED."""
        return self._booking

    @property
    def is_processing(self) -> bool:
        return self._confirming

    # --- Selecting ---

    async def load_ticket_types(self) -> list[TicketType]:
        """Load the catalog; quantities for types no longer offered are dropped.

        Raises:
            InvalidTransitionError: If the wizard is not selecting
        """
        self._require_step(WizardStep.SELECTING)
        self._ticket_types = await self._catalog.get_ticket_types()
        self._draft.selection.retain(t.id for t in self._ticket_types)
        self._forget_payment()
        return self.ticket_types

    def adjust_quantity(self, ticket_type_id: str, delta: int) -> int:
        """Apply a quantity change, clamped at zero.

        Args:
            ticket_type_id: Ticket type to adjust
            delta: Any integer change

        Returns:
            The new quantity

        Raises:
            ValidationError: If the ticket type is not in the catalog
            InvalidTransitionError: If the wizard is not selecting
        """
        self._require_step(WizardStep.SELECTING)
        if not any(t.id == ticket_type_id for t in self._ticket_types):
            raise ValidationError(
                ErrorCode.UNKNOWN_TICKET_TYPE, details={"ticket_type": ticket_type_id}
            )

        new_quantity = self._draft.selection.adjust(ticket_type_id, delta)
        self._forget_payment()
        return new_quantity

    def set_visit_date(self, visit_date: date) -> None:
        """Set the visit date; today or later.

        Raises:
            ValidationError: If the date is before today (the draft is unchanged)
            InvalidTransitionError: If the wizard is not selecting
        """
        self._require_step(WizardStep.SELECTING)
        if visit_date < self._today():
            raise ValidationError(
                ErrorCode.DATE_IN_PAST, details={"visit_date": visit_date.isoformat()}
            )

        self._draft.visit_date = visit_date
        self._forget_payment()

    # --- Transitions ---

    def proceed_to_payment(self) -> None:
        """Move SELECTING -> PAYING and freeze the total.

        Raises:
            SessionNotReadyError: If the session is still loading
            LoginRequiredError: If no one is logged in
            ValidationError: If the date is unset or no tickets are selected
        """
        self._require_step(WizardStep.SELECTING)
        if self._session.is_loading:
            raise SessionNotReadyError()
        self._session.require_authenticated(return_to=BOOKING_PATH)

        if self._draft.visit_date is None:
            raise ValidationError(ErrorCode.DATE_REQUIRED)
        if self._draft.selection.count <= 0:
            raise ValidationError(ErrorCode.TICKETS_REQUIRED)

        self._draft.frozen_total = self._draft.selection.total(self._ticket_types)
        self._draft.step = WizardStep.PAYING
        log_booking_operation(
            logger,
            "proceed_to_payment",
            ticket_count=self._draft.selection.count,
            total_price=str(self._draft.frozen_total),
            step=self._draft.step.value,
        )

    def go_back(self) -> None:
        """Move PAYING -> SELECTING, keeping the date and quantities.

        Raises:
            InvalidTransitionError: If not paying or a confirmation is in flight
        """
        self._require_step(WizardStep.PAYING)
        if self._confirming:
            raise InvalidTransitionError(message="Payment is being processed.")

        self._draft.frozen_total = None
        self._draft.step = WizardStep.SELECTING
        log_booking_operation(logger, "go_back", step=self._draft.step.value)

    async def confirm_payment(self) -> Booking:
        """Charge the frozen total, then persist the booking.

        Returns:
            The persisted Booking

        Raises:
            InvalidTransitionError: If not paying or already confirming
            PaymentError: If the charge is declined (still PAYING)
            HeritageError: Translated backend failure (still PAYING)
        """
        self._require_step(WizardStep.PAYING)
        if self._confirming:
            raise InvalidTransitionError(message="Payment is already being processed.")

        self._confirming = True
        with correlation_scope():
            try:
                booking = await self._charge_and_create()
            finally:
                self._confirming = False

            self._booking = booking
            self._draft.step = WizardStep.CONFIRMED
            log_booking_operation(
                logger,
                "confirm_payment",
                booking_id=booking.id,
                ticket_count=booking.quantity,
                total_price=str(booking.total_price),
                step=self._draft.step.value,
            )
        return booking

    async def _charge_and_create(self) -> Booking:
        draft = self._draft
        if draft.visit_date is None or draft.frozen_total is None:
            raise InvalidTransitionError(details={"step": draft.step.value})

        if self._idempotency_key is None:
            self._idempotency_key = f"booking-{uuid.uuid4()}"

        if self._payment is None:
            result = await self._payment_gateway.charge(
                draft.frozen_total, reference=self._idempotency_key
            )
            if not result.succeeded:
                log_booking_operation(
                    logger,
                    "charge",
                    total_price=str(draft.frozen_total),
                    step=draft.step.value,
                    error=result.error_message,
                )
                raise PaymentError(
                    message=result.error_message, details={"payment_id": result.payment_id}
                )
            self._payment = result

        primary = draft.selection.first_selected(self._ticket_types)
        payload = BookingCreate(
            ticket_type=primary.id if primary else None,
            quantity=draft.selection.count,
            visit_date=draft.visit_date,
            total_price=draft.frozen_total,
        )

        try:
            return await self._api.create_booking(
                payload, idempotency_key=self._idempotency_key
            )
        except TransportError as e:
            log_booking_operation(
                logger,
                "create_booking",
                ticket_count=payload.quantity,
                total_price=str(payload.total_price),
                step=draft.step.value,
                error=e.message,
            )
            raise translate_transport_error(e) from e

    def reset(self) -> None:
        """Start a fresh empty draft in SELECTING.

        Raises:
            InvalidTransitionError: If a confirmation is in flight
        """
        if self._confirming:
            raise InvalidTransitionError(message="Payment is being processed.")
        self._draft = BookingDraft()
        self._booking = None
        self._forget_payment()
        log_booking_operation(logger, "reset", step=self._draft.step.value)

    # --- Helpers ---

    def _require_step(self, expected: WizardStep) -> None:
        if self._draft.step != expected:
            raise InvalidTransitionError(
                details={"step": self._draft.step.value, "expected": expected.value}
            )

    def _forget_payment(self) -> None:
        self._payment = None
        self._idempotency_key = None
