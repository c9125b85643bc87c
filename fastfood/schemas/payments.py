from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from fastfood.domain import Payment
from fastfood.schemas.common import Money


class PaymentCreate(BaseModel):
    order_id: int
    amount: Decimal
    payment_method: str


class PaymentResponse(BaseModel):
    id: int
    order_id: int
    amount: Money
    status: str
    payment_method: str
    transaction_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            order_id=payment.order_id,
            amount=payment.amount,
            status=payment.status.value,
            payment_method=payment.payment_method,
            transaction_id=payment.transaction_id,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )


class PaymentStatusResponse(BaseModel):
    order_id: int
    status: str


class WebhookPayload(BaseModel):
    """Status callback sent by the payment provider."""

    transaction_id: str
    order_id: int
    status: str
    amount: Optional[Decimal] = None
    payment_method: Optional[str] = None
    timestamp: Optional[datetime] = None

    @field_validator("transaction_id", mode="before")
    @classmethod
    def _coerce_transaction_id(cls, value):
        if isinstance(value, int):
            return str(value)
        return value


class WebhookResponse(BaseModel):
    order_id: int
    payment_id: int
    status: str
    message: str = "webhook processed"


class CheckoutRequest(BaseModel):
    order_id: int
    email: str
    amount: Decimal


class CheckoutResponse(BaseModel):
    order_id: int
    payment_id: int
    ticket_url: str
    provider_order_id: Optional[str] = None
