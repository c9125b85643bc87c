from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from fastfood.core.errors import InvalidOrderItem, InvalidStatus, InvalidStatusTransition
from fastfood.domain.money import ZERO, to_money


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    """Kitchen workflow states of an order."""

    RECEIVED = "received"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})
KITCHEN_STATUSES = frozenset({OrderStatus.RECEIVED, OrderStatus.IN_PROGRESS, OrderStatus.READY})

MAX_ITEM_QUANTITY = 1000

# lower rank surfaces first on the kitchen screen
KITCHEN_PRIORITY = {
    OrderStatus.READY: 0,
    OrderStatus.IN_PROGRESS: 1,
    OrderStatus.RECEIVED: 2,
}


def parse_order_status(value: str | OrderStatus | None) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    normalized = (value or "").strip().lower()
    try:
        return OrderStatus(normalized)
    except ValueError as exc:
        raise InvalidStatus(value) from exc


@dataclass
class OrderItem:
    """A priced line of an order.

    ``price`` is the product price captured when the order was assembled and
    is never re-derived from the catalog afterwards.
    """

    product_id: int
    quantity: int
    price: Decimal
    id: int = 0
    order_id: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def subtotal(self) -> Decimal:
        return to_money(self.price * self.quantity)

    def is_valid(self) -> bool:
        return self.product_id > 0 and 0 < self.quantity <= MAX_ITEM_QUANTITY and self.price > 0

    def update_quantity(self, quantity: int) -> None:
        if quantity <= 0:
            raise InvalidOrderItem(f"quantity must be positive, got {quantity}")
        if quantity > MAX_ITEM_QUANTITY:
            raise InvalidOrderItem(f"quantity must be at most {MAX_ITEM_QUANTITY}, got {quantity}")
        self.quantity = quantity
        self.updated_at = utcnow()


@dataclass
class Order:
    cpf: str
    customer_id: int = 0
    id: int = 0
    status: OrderStatus = OrderStatus.RECEIVED
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    items: list[OrderItem] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        total = ZERO
        for item in self.items:
            total += item.subtotal
        return total

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def add_item(self, item: OrderItem) -> None:
        self.items.append(item)
        self.updated_at = utcnow()

    def is_valid(self) -> bool:
        return len(self.items) > 0 and bool((self.cpf or "").strip())

    def update_status(self, status: OrderStatus) -> bool:
        """Move the order to ``status``.

        Returns False when the order already is in ``status``. Completed and
        cancelled orders never leave their state.
        """
        if status == self.status:
            return False
        if self.is_terminal:
            raise InvalidStatusTransition(self.status.value, status.value)
        self.status = status
        self.updated_at = utcnow()
        return True
