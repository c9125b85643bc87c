from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from fastfood.core.errors import InvalidPaymentStatus
from fastfood.domain.order import utcnow


class PaymentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELED = "canceled"


# statuses the provider may report through the webhook
WEBHOOK_STATUSES = frozenset({PaymentStatus.APPROVED, PaymentStatus.REJECTED, PaymentStatus.CANCELED})


def parse_webhook_status(value: str | PaymentStatus | None) -> PaymentStatus:
    if isinstance(value, PaymentStatus):
        status = value
    else:
        try:
            status = PaymentStatus((value or "").strip().lower())
        except ValueError as exc:
            raise InvalidPaymentStatus(value) from exc
    if status not in WEBHOOK_STATUSES:
        raise InvalidPaymentStatus(value)
    return status


@dataclass
class Payment:
    order_id: int
    amount: Decimal
    payment_method: str
    id: int = 0
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def update_status(self, status: PaymentStatus, transaction_id: str) -> None:
        self.status = status
        self.transaction_id = transaction_id
        self.updated_at = utcnow()

    @property
    def is_approved(self) -> bool:
        return self.status == PaymentStatus.APPROVED

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING
