from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fastfood.domain import Order, OrderItem
from fastfood.schemas.common import Money


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int


class OrderCreate(BaseModel):
    customer_id: Optional[int] = 0
    cpf: str = ""
    items: list[OrderItemCreate] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: str


class OrderItemQuantityUpdate(BaseModel):
    quantity: int


class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Money
    subtotal: Money
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            id=item.id,
            order_id=item.order_id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.price,
            subtotal=item.subtotal,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class OrderResponse(BaseModel):
    id: int
    customer_id: int
    cpf: str
    status: str
    total: Money
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            cpf=order.cpf,
            status=order.status.value,
            total=order.total,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemResponse.from_domain(item) for item in order.items],
        )
