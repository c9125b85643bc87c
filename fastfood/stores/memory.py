"""In-memory stores with commit/rollback semantics.

Used by the test-suite and by local experiments that do not need a
database. Every store of one ``InMemoryDatabase`` writes to a working copy
that becomes visible to later readers only after ``commit``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from fastfood.core.errors import OrderItemNotFound, OrderNotFound, PaymentAlreadyExists, PaymentNotFound
from fastfood.domain import KITCHEN_PRIORITY, KITCHEN_STATUSES, Order, OrderItem, Payment, Product


@dataclass
class _Tables:
    products: dict[int, Product] = field(default_factory=dict)
    orders: dict[int, Order] = field(default_factory=dict)
    items: dict[int, OrderItem] = field(default_factory=dict)
    payments: dict[int, Payment] = field(default_factory=dict)
    sequences: dict[str, int] = field(default_factory=dict)

    def next_id(self, table: str) -> int:
        value = self.sequences.get(table, 0) + 1
        self.sequences[table] = value
        return value


class InMemoryDatabase:
    def __init__(self) -> None:
        self._committed = _Tables()
        self._working = _Tables()
        self.commits = 0
        self.rollbacks = 0

    @property
    def tables(self) -> _Tables:
        return self._working

    def add_product(self, product: Product) -> Product:
        self._working.products[product.id] = copy.deepcopy(product)
        self._committed.products[product.id] = copy.deepcopy(product)
        return product

    def commit(self) -> None:
        self._committed = copy.deepcopy(self._working)
        self.commits += 1

    def rollback(self) -> None:
        self._working = copy.deepcopy(self._committed)
        self.rollbacks += 1


class InMemoryProductLookup:
    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    def get_by_id(self, product_id: int) -> Product | None:
        product = self.database.tables.products.get(product_id)
        return copy.deepcopy(product) if product is not None else None


def _without_items(order: Order) -> Order:
    clone = copy.deepcopy(order)
    clone.items = []
    return clone


def _newest_first(orders) -> list[Order]:
    return sorted(orders, key=lambda order: (order.created_at, order.id), reverse=True)


class InMemoryOrderStore:
    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    def create(self, order: Order) -> None:
        tables = self.database.tables
        order.id = tables.next_id("orders")
        tables.orders[order.id] = _without_items(order)

    def get_by_id(self, order_id: int) -> Order | None:
        order = self.database.tables.orders.get(order_id)
        return _without_items(order) if order is not None else None

    def get_by_cpf(self, cpf: str) -> list[Order]:
        orders = [o for o in self.database.tables.orders.values() if o.cpf == cpf]
        return [_without_items(o) for o in _newest_first(orders)]

    def get_by_customer_id(self, customer_id: int) -> list[Order]:
        orders = [o for o in self.database.tables.orders.values() if o.customer_id == customer_id]
        return [_without_items(o) for o in _newest_first(orders)]

    def get_all(self) -> list[Order]:
        return [_without_items(o) for o in _newest_first(self.database.tables.orders.values())]

    def get_pending_orders_for_kitchen(self) -> list[Order]:
        pending = [o for o in self.database.tables.orders.values() if o.status in KITCHEN_STATUSES]
        pending.sort(key=lambda o: (KITCHEN_PRIORITY[o.status], o.created_at, o.id))
        return [_without_items(o) for o in pending]

    def update(self, order: Order) -> None:
        tables = self.database.tables
        if order.id not in tables.orders:
            raise OrderNotFound(order.id)
        tables.orders[order.id] = _without_items(order)

    def delete(self, order_id: int) -> None:
        tables = self.database.tables
        for item_id in [i.id for i in tables.items.values() if i.order_id == order_id]:
            del tables.items[item_id]
        for payment_id in [p.id for p in tables.payments.values() if p.order_id == order_id]:
            del tables.payments[payment_id]
        tables.orders.pop(order_id, None)


class InMemoryOrderItemStore:
    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    def create(self, item: OrderItem) -> None:
        tables = self.database.tables
        item.id = tables.next_id("order_items")
        tables.items[item.id] = copy.deepcopy(item)

    def get_by_order_id(self, order_id: int) -> list[OrderItem]:
        items = [i for i in self.database.tables.items.values() if i.order_id == order_id]
        return [copy.deepcopy(i) for i in sorted(items, key=lambda i: i.id)]

    def update(self, item: OrderItem) -> None:
        tables = self.database.tables
        if item.id not in tables.items:
            raise OrderItemNotFound(item.order_id, item.id)
        tables.items[item.id] = copy.deepcopy(item)

    def delete(self, item_id: int) -> None:
        self.database.tables.items.pop(item_id, None)


class InMemoryPaymentStore:
    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    def create(self, payment: Payment) -> None:
        tables = self.database.tables
        if any(p.order_id == payment.order_id for p in tables.payments.values()):
            raise PaymentAlreadyExists(payment.order_id)
        payment.id = tables.next_id("payments")
        tables.payments[payment.id] = copy.deepcopy(payment)

    def get_by_id(self, payment_id: int) -> Payment | None:
        payment = self.database.tables.payments.get(payment_id)
        return copy.deepcopy(payment) if payment is not None else None

    def get_by_order_id(self, order_id: int) -> Payment | None:
        for payment in self.database.tables.payments.values():
            if payment.order_id == order_id:
                return copy.deepcopy(payment)
        return None

    def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        matches = [p for p in self.database.tables.payments.values() if p.transaction_id == str(transaction_id)]
        if not matches:
            return None
        return copy.deepcopy(max(matches, key=lambda p: p.updated_at))

    def update(self, payment: Payment) -> None:
        tables = self.database.tables
        if payment.id not in tables.payments:
            raise PaymentNotFound(order_id=payment.order_id)
        tables.payments[payment.id] = copy.deepcopy(payment)

    def delete(self, payment_id: int) -> None:
        self.database.tables.payments.pop(payment_id, None)
