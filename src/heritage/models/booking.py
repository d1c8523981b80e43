"""Booking models: the in-progress draft and the persisted record."""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .enums import BookingStatus, WizardStep
from .ticket import TicketSelection


class TicketTypeSummary(BaseModel):
    """Ticket type as embedded in a booking by the backend."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str
    price: Decimal | None = None


class BookingOwner(BaseModel):
    """Owner as embedded in an admin booking listing."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str | None = Field(default=None, validation_alias=AliasChoices("userName", "name"))
    email: str | None = None


class Booking(BaseModel):
    """A persisted booking. The client only holds read-only copies."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"), description="Booking ID")
    user: str | BookingOwner | None = Field(default=None, description="Owning identity")
    ticket_type: str | TicketTypeSummary | None = Field(
        default=None,
        validation_alias=AliasChoices("ticketType", "ticket_type"),
        description="Ticket type reference or embedded summary",
    )
    quantity: int = Field(..., ge=0, description="Number of tickets")
    visit_date: datetime = Field(
        ..., validation_alias=AliasChoices("visitDate", "visit_date"), description="Visit date"
    )
    total_price: Decimal = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("totalPrice", "total_price"),
        description="Amount charged",
    )
    status: BookingStatus = Field(default=BookingStatus.PENDING, description="Booking status")
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("createdAt", "created_at"),
        description="Creation timestamp",
    )

    @property
    def is_cancellable(self) -> bool:
        return self.status != BookingStatus.CANCELLED


class BookingCreate(BaseModel):
    """Data required to create a booking."""

    model_config = ConfigDict(strict=True)

    ticket_type: str | None = Field(default=None, description="Primary ticket type ID")
    quantity: int = Field(..., gt=0, description="Total ticket count")
    visit_date: date = Field(..., description="Visit date")
    total_price: Decimal = Field(..., ge=0, description="Frozen draft total")

    def to_payload(self) -> dict[str, Any]:
        """Request body in the backend's camelCase shape."""
        visit_at = datetime.combine(self.visit_date, time.min, tzinfo=timezone.utc)
        total = self.total_price
        return {
            "ticketType": self.ticket_type,
            "quantity": self.quantity,
            "visitDate": visit_at.isoformat(),
            "totalPrice": int(total) if total == total.to_integral_value() else float(total),
        }


class BookingDraft(BaseModel):
    """The in-progress booking held by the wizard before confirmation."""

    visit_date: date | None = None
    selection: TicketSelection = Field(default_factory=TicketSelection)
    step: WizardStep = WizardStep.SELECTING
    frozen_total: Decimal | None = Field(
        default=None, description="Total captured on entering the payment step"
    )
