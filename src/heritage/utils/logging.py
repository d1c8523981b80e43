"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID context management for request tracing
- Structured logging formatter for consistent log output
- Helper functions for booking and session event logging

Usage:
    from heritage.utils.logging import correlation_scope, get_logger

    # Around a user action (session and wizard entry points do this):
    with correlation_scope():
        ...

    # In service code:
    logger = get_logger(__name__)
    logger.info("Booking confirmed", extra={"booking_id": "b-123"})
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

PACKAGE_LOGGER = "heritage"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def generate_correlation_id() -> str:
    """Generate a new correlation ID.

    Returns:
        UUID-based correlation ID string
    """
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    """Get the current correlation ID, or None if not set."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID context."""
    _correlation_id.set(None)


@contextmanager
def correlation_scope() -> Iterator[str]:
    """Run one user action under a correlation ID.

    Keeps an ID the caller already set. Otherwise a fresh one is set for
    the duration of the block and removed afterwards.

    Yields:
        The correlation ID in effect
    """
    existing = get_correlation_id()
    if existing is not None:
        yield existing
        return

    cid = generate_correlation_id()
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation-id"
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter for structured log output with correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or "no-correlation-id"

        base = super().format(record)

        # Prefix for easy grep/filtering
        return f"[{record.correlation_id}] {base}"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a structured stream handler to the package logger.

    Safe to call more than once; the handler is only installed the first time.

    Args:
        level: Log level name (e.g., "DEBUG", "INFO")

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())

    if not any(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter(DEFAULT_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        logger.addHandler(handler)

    return logger


def log_booking_operation(
    logger: logging.Logger,
    operation: str,
    *,
    booking_id: str | None = None,
    ticket_count: int | None = None,
    total_price: Any = None,
    step: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a booking wizard operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "proceed_to_payment", "confirm_payment")
        booking_id: Persisted booking ID if available
        ticket_count: Number of tickets in the draft
        total_price: Draft total
        step: Wizard step after the operation
        error: Error message if operation failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if booking_id:
        context["booking_id"] = booking_id
    if ticket_count is not None:
        context["ticket_count"] = ticket_count
    if total_price is not None:
        context["total_price"] = str(total_price)
    if step:
        context["step"] = step
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Booking operation: {operation}"]
    for key, value in context.items():
        if key != "operation":
            msg_parts.append(f"{key}={value}")

    message = " | ".join(msg_parts)

    if error:
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_session_event(
    logger: logging.Logger,
    event: str,
    *,
    user_id: str | None = None,
    role: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a session lifecycle event with structured context.

    Args:
        logger: Logger instance
        event: Event name (e.g., "login", "logout", "session_expired")
        user_id: Identity ID if known
        role: Identity role if known
        result: Outcome (success, anonymous, denied, error)
        error: Error message if the event failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"session_event": event}

    if user_id:
        context["user_id"] = user_id
    if role:
        context["role"] = role
    if result:
        context["result"] = result
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Session event: {event}"]
    if result:
        msg_parts.append(f"result={result}")
    if user_id:
        msg_parts.append(f"user={user_id}")
    if error:
        msg_parts.append(f"error={error}")

    message = " | ".join(msg_parts)

    if result == "error":
        logger.error(message, extra=context)
    elif result == "denied":
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)
