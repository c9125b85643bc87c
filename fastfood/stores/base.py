from __future__ import annotations

from typing import Protocol

from fastfood.domain import Order, OrderItem, Payment, Product


class UnitOfWork(Protocol):
    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class ProductLookup(Protocol):
    def get_by_id(self, product_id: int) -> Product | None:
        ...


class OrderStore(Protocol):
    def create(self, order: Order) -> None:
        """Persist ``order`` (without its items) and assign ``order.id``."""
        ...

    def get_by_id(self, order_id: int) -> Order | None:
        ...

    def get_by_cpf(self, cpf: str) -> list[Order]:
        ...

    def get_by_customer_id(self, customer_id: int) -> list[Order]:
        ...

    def get_all(self) -> list[Order]:
        ...

    def get_pending_orders_for_kitchen(self) -> list[Order]:
        ...

    def update(self, order: Order) -> None:
        ...

    def delete(self, order_id: int) -> None:
        """Remove the order together with its items and its payment."""
        ...


class OrderItemStore(Protocol):
    def create(self, item: OrderItem) -> None:
        ...

    def get_by_order_id(self, order_id: int) -> list[OrderItem]:
        ...

    def update(self, item: OrderItem) -> None:
        ...

    def delete(self, item_id: int) -> None:
        ...


class PaymentStore(Protocol):
    def create(self, payment: Payment) -> None:
        """Persist ``payment``; raises PaymentAlreadyExists for a second payment of an order."""
        ...

    def get_by_id(self, payment_id: int) -> Payment | None:
        ...

    def get_by_order_id(self, order_id: int) -> Payment | None:
        ...

    def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        ...

    def update(self, payment: Payment) -> None:
        ...

    def delete(self, payment_id: int) -> None:
        ...
