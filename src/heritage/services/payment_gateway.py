"""Payment step for the booking wizard.

The wizard only depends on the PaymentGateway interface. The simulated
gateway stands in for a real processor: it waits for a configurable
delay and then succeeds (or fails, when configured to) without moving
any money. A real integration subclasses PaymentGateway.
"""

import asyncio
import datetime as dt
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal

from heritage.models import PaymentProvider, PaymentResult, TransactionStatus
from heritage.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGateway(ABC):
    """Pluggable charge capability."""

    @abstractmethod
    async def charge(self, amount: Decimal, *, reference: str) -> PaymentResult:
        """Attempt to charge an amount.

        Args:
            amount: Amount to charge
            reference: Caller's idempotency reference for this draft

        Returns:
            PaymentResult with COMPLETED or FAILED status
        """


class SimulatedPaymentGateway(PaymentGateway):
    """Payment gateway that simulates processing time.

    Usage:
        gateway = SimulatedPaymentGateway(delay_seconds=2.0)
        result = await gateway.charge(Decimal("62"), reference="draft-1")
    """

    def __init__(self, delay_seconds: float = 2.0, succeed: bool = True) -> None:
        """Initialize simulated gateway.

        Args:
            delay_seconds: Simulated processing delay
            succeed: Whether charges succeed
        """
        self.delay_seconds = delay_seconds
        self.succeed = succeed

    def _generate_payment_id(self, prefix: str = "TXN") -> str:
        """Generate a unique payment ID like TXN-ABC123DEF456."""
        return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"

    async def charge(self, amount: Decimal, *, reference: str) -> PaymentResult:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        payment_id = self._generate_payment_id()
        now = dt.datetime.now(dt.timezone.utc)

        if not self.succeed:
            logger.warning("Simulated charge declined: %s (%s)", payment_id, reference)
            return PaymentResult(
                payment_id=payment_id,
                status=TransactionStatus.FAILED,
                amount=amount,
                provider=PaymentProvider.SIMULATED,
                reference=reference,
                created_at=now,
                error_message="Payment processing failed. Please try again.",
            )

        logger.info("Simulated charge completed: %s amount=%s", payment_id, amount)
        return PaymentResult(
            payment_id=payment_id,
            status=TransactionStatus.COMPLETED,
            amount=amount,
            provider=PaymentProvider.SIMULATED,
            provider_transaction_id=f"SIM-{uuid.uuid4().hex[:8]}",
            reference=reference,
            created_at=now,
        )
