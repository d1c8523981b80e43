"""Unit tests for the wire and draft models.

Tests cover:
- Identity alias handling (_id, userName vs name) and immutability
- TicketSelection clamping, totals and counts
- Booking parsing and the BookingCreate request body
- Exhibit form encoding and admin aggregates
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pydantic
import pytest

from heritage.models import (
    FALLBACK_TICKET_TYPES,
    AdminStats,
    AnalyticsReport,
    Booking,
    BookingCreate,
    BookingOwner,
    BookingStatus,
    ExhibitInput,
    Identity,
    Role,
    TicketSelection,
    TicketType,
    TicketTypeSummary,
    UserRecord,
)

ADULT = TicketType(id="adult", name="Adult", price=Decimal("25"))
CHILD = TicketType(id="child", name="Child", price=Decimal("12"))
STUDENT = TicketType(id="student", name="Student", price=Decimal("15"))


class TestIdentity:
    """Tests for the Identity model."""

    def test_accepts_user_name_alias(self) -> None:
        identity = Identity.model_validate(
            {"_id": "u-1", "userName": "Ada", "email": "ada@museum.org", "role": "admin"}
        )

        assert identity.id == "u-1"
        assert identity.name == "Ada"
        assert identity.role == Role.ADMIN
        assert identity.is_admin

    def test_accepts_name_field_and_defaults_role(self) -> None:
        identity = Identity.model_validate({"id": "u-2", "name": "Bo", "email": "bo@museum.org"})

        assert identity.name == "Bo"
        assert identity.role == Role.USER
        assert not identity.is_admin

    def test_is_immutable(self) -> None:
        identity = Identity(id="u-1", name="Ada", email="ada@museum.org")

        with pytest.raises(pydantic.ValidationError):
            identity.name = "Changed"  # type: ignore[misc]

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Identity.model_validate({"_id": "u-1", "email": "a@museum.org", "role": "root"})

    def test_user_record_reads_admin_listing_fields(self) -> None:
        record = UserRecord.model_validate(
            {
                "_id": "u-3",
                "userName": "Cy",
                "email": "cy@museum.org",
                "role": "user",
                "createdAt": "2030-01-01T10:00:00Z",
            }
        )

        assert record.created_at == datetime(2030, 1, 1, 10, tzinfo=timezone.utc)


class TestTicketSelection:
    """Tests for quantity clamping and totals."""

    def test_quantity_never_negative(self) -> None:
        selection = TicketSelection()

        # When: Applying deltas of mixed sign and magnitude
        for delta in (1, -5, 3, -1, -100, 2, 0, -2):
            selection.adjust("adult", delta)
            # Then: Quantity never drops below zero
            assert selection.quantity("adult") >= 0

        assert selection.quantity("adult") == 0

    def test_total_is_sum_of_quantity_times_price(self) -> None:
        selection = TicketSelection()
        selection.adjust("adult", 2)
        selection.adjust("child", 1)

        assert selection.total([ADULT, CHILD]) == Decimal("62")
        assert selection.count == 3

    def test_student_selection_and_clear(self) -> None:
        selection = TicketSelection()
        selection.adjust("student", 3)

        assert selection.total([STUDENT]) == Decimal("45")
        assert selection.count == 3

        # When: Clearing every quantity back to zero
        selection.adjust("student", -3)

        assert selection.total([STUDENT]) == Decimal("0")
        assert selection.count == 0

    def test_first_selected_follows_catalog_order(self) -> None:
        selection = TicketSelection()
        selection.adjust("student", 1)
        selection.adjust("child", 2)

        assert selection.first_selected([ADULT, CHILD, STUDENT]) == CHILD

    def test_first_selected_none_when_empty(self) -> None:
        assert TicketSelection().first_selected([ADULT]) is None

    def test_retain_drops_types_no_longer_offered(self) -> None:
        selection = TicketSelection()
        selection.adjust("adult", 2)
        selection.adjust("child", 1)

        selection.retain([ADULT.id, STUDENT.id])

        assert selection.quantities == {"adult": 2}
        assert selection.count == 2
        assert selection.total([ADULT, STUDENT]) == Decimal("50")

    def test_negative_quantities_rejected_on_construction(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            TicketSelection(quantities={"adult": -1})


class TestTicketType:
    """Tests for the ticket catalog model."""

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            TicketType(id="x", name="X", price=Decimal("-1"))

    def test_fallback_ticket_types(self) -> None:
        assert [(t.id, t.name, t.price) for t in FALLBACK_TICKET_TYPES] == [
            ("1", "Adult", Decimal("25")),
            ("2", "Child", Decimal("12")),
            ("3", "Senior", Decimal("18")),
            ("4", "Student", Decimal("15")),
        ]


class TestBooking:
    """Tests for parsing persisted bookings."""

    def test_parses_backend_shape(self) -> None:
        booking = Booking.model_validate(
            {
                "_id": "b-1",
                "user": "u-1",
                "ticketType": "adult",
                "quantity": 2,
                "visitDate": "2030-02-01T00:00:00.000Z",
                "totalPrice": 50,
                "status": "confirmed",
            }
        )

        assert booking.id == "b-1"
        assert booking.ticket_type == "adult"
        assert booking.total_price == Decimal("50")
        assert booking.status == BookingStatus.CONFIRMED
        assert booking.is_cancellable

    def test_parses_embedded_owner_and_ticket_type(self) -> None:
        booking = Booking.model_validate(
            {
                "_id": "b-2",
                "user": {"_id": "u-1", "userName": "Ada", "email": "ada@museum.org"},
                "ticketType": {"_id": "adult", "name": "Adult", "price": 25},
                "quantity": 1,
                "visitDate": "2030-02-01T00:00:00Z",
                "totalPrice": 25,
                "status": "cancelled",
            }
        )

        assert isinstance(booking.user, BookingOwner)
        assert booking.user.name == "Ada"
        assert isinstance(booking.ticket_type, TicketTypeSummary)
        assert booking.ticket_type.name == "Adult"
        assert not booking.is_cancellable

    def test_status_defaults_to_pending(self) -> None:
        booking = Booking.model_validate(
            {"_id": "b-3", "quantity": 1, "visitDate": "2030-02-01T00:00:00Z", "totalPrice": 25}
        )

        assert booking.status == BookingStatus.PENDING


class TestBookingCreate:
    """Tests for the create-booking request body."""

    def test_payload_uses_backend_field_names(self) -> None:
        create = BookingCreate(
            ticket_type="adult",
            quantity=3,
            visit_date=date(2030, 2, 1),
            total_price=Decimal("62"),
        )

        assert create.to_payload() == {
            "ticketType": "adult",
            "quantity": 3,
            "visitDate": "2030-02-01T00:00:00+00:00",
            "totalPrice": 62,
        }

    def test_fractional_total_sent_as_float(self) -> None:
        create = BookingCreate(
            ticket_type="adult",
            quantity=1,
            visit_date=date(2030, 2, 1),
            total_price=Decimal("12.50"),
        )

        assert create.to_payload()["totalPrice"] == 12.5

    def test_zero_quantity_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            BookingCreate(
                ticket_type="adult",
                quantity=0,
                visit_date=date(2030, 2, 1),
                total_price=Decimal("0"),
            )


class TestExhibitInput:
    """Tests for the admin exhibit form encoding."""

    def test_form_data_omits_unset_duration(self) -> None:
        exhibit = ExhibitInput(name=" Egyptian Gallery ", description="Mummies", location="Wing A")

        assert exhibit.to_form_data() == {
            "name": "Egyptian Gallery",
            "description": "Mummies",
            "location": "Wing A",
            "category": "",
        }
        assert exhibit.to_files() is None

    def test_files_carry_image_upload(self) -> None:
        exhibit = ExhibitInput(
            name="Vases", description="Greek", image=b"\x89PNG", image_filename="vase.png"
        )

        assert exhibit.to_files() == {"image": ("vase.png", b"\x89PNG")}


class TestAdminAggregates:
    """Tests for dashboard and analytics models."""

    def test_stats_from_camel_case(self) -> None:
        stats = AdminStats.model_validate(
            {"totalUsers": 10, "totalBookings": 4, "totalRevenue": 120.5, "totalExhibits": 3}
        )

        assert stats.total_users == 10
        assert stats.total_revenue == Decimal("120.5")

    def test_analytics_missing_series_are_empty(self) -> None:
        report = AnalyticsReport.model_validate(
            {"revenueData": [{"month": "Jan", "revenue": 400}]}
        )

        assert report.revenue[0].revenue == Decimal("400")
        assert report.visitors == []
        assert report.ticket_types == []
