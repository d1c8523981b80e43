"""Payment result model for the pluggable payment step."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .enums import PaymentProvider, TransactionStatus


class PaymentResult(BaseModel):
    """Result of a charge attempt."""

    model_config = ConfigDict(strict=True)

    payment_id: str = Field(..., description="Unique payment ID")
    status: TransactionStatus = Field(..., description="Transaction status")
    amount: Decimal = Field(..., ge=0, description="Amount charged")
    provider: PaymentProvider = Field(default=PaymentProvider.SIMULATED)
    provider_transaction_id: str | None = Field(
        default=None, description="External transaction reference"
    )
    reference: str | None = Field(default=None, description="Caller's idempotency reference")
    created_at: datetime = Field(..., description="Attempt timestamp")
    error_message: str | None = Field(default=None, description="Error details if failed")

    @property
    def succeeded(self) -> bool:
        return self.status == TransactionStatus.COMPLETED
