from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from fastfood.core.errors import (
    InvalidOrder,
    InvalidOrderItem,
    OrderItemNotFound,
    OrderNotFound,
    PersistenceError,
    ProductNotFound,
)
from fastfood.domain import Order, OrderItem, OrderStatus, parse_order_status, utcnow
from fastfood.services.kitchen import build_kitchen_queue
from fastfood.services.order_events import emit_order_created, emit_order_status_changed
from fastfood.stores.base import OrderItemStore, OrderStore, ProductLookup, UnitOfWork

logger = logging.getLogger(__name__)


def _read(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def _as_int(value: Any, label: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidOrderItem(f"{label} must be an integer, got {value!r}") from exc


class OrderService:
    def __init__(
        self,
        orders: OrderStore,
        items: OrderItemStore,
        products: ProductLookup,
        uow: UnitOfWork,
    ) -> None:
        self.orders = orders
        self.items = items
        self.products = products
        self.uow = uow

    def create_order(self, customer_id: int | None, cpf: str, items: Iterable[Any]) -> Order:
        """Assemble, validate and persist a new order.

        Every requested line is priced from the catalog at this moment. Nothing
        is written unless every line resolves to an existing product and the
        assembled order is valid.
        """
        requested = list(items or [])
        if not requested:
            raise InvalidOrder("order must contain at least one item")

        order = Order(cpf=(cpf or "").strip(), customer_id=int(customer_id or 0))
        for entry in requested:
            order.add_item(self._assemble_item(entry))

        if not order.is_valid():
            raise InvalidOrder("order must contain at least one item and a CPF")

        try:
            self.orders.create(order)
            for item in order.items:
                item.order_id = order.id
                self.items.create(item)
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise

        logger.info("Order created items=%s total=%s", len(order.items), order.total, extra={"order_id": order.id})
        emit_order_created(order)
        return order

    def _assemble_item(self, entry: Any) -> OrderItem:
        product_id = _as_int(_read(entry, "product_id"), "product_id")
        quantity = _as_int(_read(entry, "quantity"), "quantity")
        try:
            product = self.products.get_by_id(product_id)
        except PersistenceError as exc:
            logger.error("failed to validate product with ID %d: %s", product_id, exc)
            raise ProductNotFound(product_id) from exc
        if product is None:
            raise ProductNotFound(product_id)

        item = OrderItem(product_id=product.id, quantity=quantity, price=product.price)
        if not item.is_valid():
            raise InvalidOrderItem(
                f"invalid item for product {product_id}: quantity={quantity} price={product.price}"
            )
        return item

    def get_order(self, order_id: int) -> Order:
        order = self.orders.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        order.items = self.items.get_by_order_id(order.id)
        return order

    def list_orders(self) -> list[Order]:
        return self._with_items(self.orders.get_all())

    def get_orders_by_cpf(self, cpf: str) -> list[Order]:
        return self._with_items(self.orders.get_by_cpf((cpf or "").strip()))

    def get_orders_by_customer(self, customer_id: int) -> list[Order]:
        return self._with_items(self.orders.get_by_customer_id(customer_id))

    def get_orders_for_kitchen(self) -> list[Order]:
        return build_kitchen_queue(self._with_items(self.orders.get_pending_orders_for_kitchen()))

    def _with_items(self, orders: list[Order]) -> list[Order]:
        loaded: list[Order] = []
        for order in orders:
            try:
                order.items = self.items.get_by_order_id(order.id)
            except PersistenceError:
                logger.warning("Skipping order whose items failed to load", extra={"order_id": order.id})
                continue
            loaded.append(order)
        return loaded

    def update_order_status(self, order_id: int, status: str | OrderStatus) -> Order:
        order = self.get_order(order_id)
        new_status = parse_order_status(status)
        previous = order.status
        if not order.update_status(new_status):
            return order

        try:
            self.orders.update(order)
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise

        logger.info("Order status updated %s -> %s", previous.value, new_status.value, extra={"order_id": order.id})
        emit_order_status_changed(order, previous)
        return order

    def update_item_quantity(self, order_id: int, item_id: int, quantity: int) -> Order:
        order = self.get_order(order_id)
        item = next((entry for entry in order.items if entry.id == item_id), None)
        if item is None:
            raise OrderItemNotFound(order_id, item_id)
        previous_quantity = item.quantity
        item.update_quantity(quantity)
        order.updated_at = utcnow()

        try:
            self.items.update(item)
            self.orders.update(order)
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise

        logger.info(
            "Order item %s quantity corrected %s -> %s",
            item_id,
            previous_quantity,
            quantity,
            extra={"order_id": order_id},
        )
        return order

    def delete_order(self, order_id: int) -> None:
        if self.orders.get_by_id(order_id) is None:
            raise OrderNotFound(order_id)
        try:
            self.orders.delete(order_id)
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            raise
        logger.info("Order deleted", extra={"order_id": order_id})
