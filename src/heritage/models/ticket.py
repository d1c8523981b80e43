"""Ticket type and ticket selection models."""

from decimal import Decimal
from typing import Annotated, Iterable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TicketType(BaseModel):
    """A purchasable admission category."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"), description="Ticket type ID")
    name: str = Field(..., description="Display name (e.g., Adult)")
    price: Decimal = Field(..., ge=0, description="Unit price")
    description: str | None = Field(default=None, description="Eligibility note")


# Used when the backend catalog is unreachable or empty
FALLBACK_TICKET_TYPES: tuple[TicketType, ...] = (
    TicketType(id="1", name="Adult", price=Decimal("25"), description="Ages 18+"),
    TicketType(id="2", name="Child", price=Decimal("12"), description="Ages 3-17"),
    TicketType(id="3", name="Senior", price=Decimal("18"), description="Ages 65+"),
    TicketType(id="4", name="Student", price=Decimal("15"), description="With valid ID"),
)


class TicketSelection(BaseModel):
    """Quantity chosen per ticket type within one booking session.

    Quantities never go below zero; adjust() clamps.
    """

    quantities: dict[str, Annotated[int, Field(ge=0)]] = Field(default_factory=dict)

    def quantity(self, ticket_type_id: str) -> int:
        return self.quantities.get(ticket_type_id, 0)

    def adjust(self, ticket_type_id: str, delta: int) -> int:
        """Apply delta to a ticket type's quantity, clamped at zero.

        Args:
            ticket_type_id: Ticket type to adjust
            delta: Any integer change

        Returns:
            The new quantity
        """
        new_quantity = max(0, self.quantity(ticket_type_id) + delta)
        self.quantities[ticket_type_id] = new_quantity
        return new_quantity

    @property
    def count(self) -> int:
        """Total number of tickets selected."""
        return sum(self.quantities.values())

    def total(self, ticket_types: Iterable[TicketType]) -> Decimal:
        """Sum of quantity x unit price over the given ticket types."""
        return sum(
            (t.price * self.quantity(t.id) for t in ticket_types),
            Decimal("0"),
        )

    def first_selected(self, ticket_types: Iterable[TicketType]) -> TicketType | None:
        """First ticket type, in catalog order, with a positive quantity."""
        return next((t for t in ticket_types if self.quantity(t.id) > 0), None)

    def retain(self, ticket_type_ids: Iterable[str]) -> None:
        """Drop quantities for ticket types not in ticket_type_ids."""
        keep = set(ticket_type_ids)
        self.quantities = {k: v for k, v in self.quantities.items() if k in keep}
