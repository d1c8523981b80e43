"""Enumeration types for Heritage booking data models."""

from enum import Enum


class Role(str, Enum):
    """Role of an authenticated identity."""

    USER = "user"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    """Status of a persisted booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class WizardStep(str, Enum):
    """Step of the booking wizard."""

    SELECTING = "selecting"
    PAYING = "paying"
    CONFIRMED = "confirmed"


class SessionState(str, Enum):
    """Lifecycle of the session manager."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class TransactionStatus(str, Enum):
    """Status of a payment transaction."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentProvider(str, Enum):
    """Payment processing providers."""

    SIMULATED = "simulated"
