"""Admin console aggregate models."""

from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AdminStats(BaseModel):
    """Dashboard counters."""

    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(default=0, ge=0, validation_alias=AliasChoices("totalUsers", "total_users"))
    total_bookings: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("totalBookings", "total_bookings")
    )
    total_revenue: Decimal = Field(
        default=Decimal("0"), validation_alias=AliasChoices("totalRevenue", "total_revenue")
    )
    total_exhibits: int = Field(
        default=0, ge=0, validation_alias=AliasChoices("totalExhibits", "total_exhibits")
    )


class RevenuePoint(BaseModel):
    month: str
    revenue: Decimal


class VisitorsPoint(BaseModel):
    day: str
    visitors: int


class TicketShare(BaseModel):
    name: str
    value: int


class AnalyticsReport(BaseModel):
    """Chart series for the analytics page. Missing series are empty."""

    model_config = ConfigDict(populate_by_name=True)

    revenue: list[RevenuePoint] = Field(
        default_factory=list, validation_alias=AliasChoices("revenueData", "revenue")
    )
    visitors: list[VisitorsPoint] = Field(
        default_factory=list, validation_alias=AliasChoices("visitorsData", "visitors")
    )
    ticket_types: list[TicketShare] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ticketTypeData", "ticketTypes", "ticket_types"),
    )
