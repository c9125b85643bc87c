from decimal import Decimal
from unittest.mock import patch

import pytest

from fastfood.core.errors import (
    InvalidOrder,
    InvalidOrderItem,
    InvalidStatus,
    InvalidStatusTransition,
    OrderItemNotFound,
    OrderNotFound,
    PersistenceError,
    ProductNotFound,
)
from fastfood.domain import MAX_ITEM_QUANTITY, OrderStatus
from fastfood.services.orders import OrderService
from fastfood.stores.memory import InMemoryOrderItemStore, InMemoryOrderStore, InMemoryProductLookup
from tests.fixtures_data import (
    GUEST_ORDER_PAYLOAD,
    HAPPY_PATH_CPF,
    HAPPY_PATH_ORDER_PAYLOAD,
    HAPPY_PATH_ORDER_TOTAL,
)


class SpyOrderStore(InMemoryOrderStore):
    def __init__(self, database):
        super().__init__(database)
        self.created = 0

    def create(self, order):
        self.created += 1
        super().create(order)


class FailingItemStore(InMemoryOrderItemStore):
    def __init__(self, database, fail_on_call=2, fail_on_load=()):
        super().__init__(database)
        self.calls = 0
        self.fail_on_call = fail_on_call
        self.fail_on_load = set(fail_on_load)

    def create(self, item):
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise PersistenceError("failed to create item")
        super().create(item)

    def get_by_order_id(self, order_id):
        if order_id in self.fail_on_load:
            raise PersistenceError(f"failed to load items of order {order_id}")
        return super().get_by_order_id(order_id)


class BrokenProductLookup:
    def get_by_id(self, product_id):
        raise PersistenceError(f"failed to load product {product_id}")


def _create(service, payload=HAPPY_PATH_ORDER_PAYLOAD):
    return service.create_order(payload.get("customer_id"), payload["cpf"], payload["items"])


def test_create_order_prices_items_from_catalog(order_service, memory_db):
    order = _create(order_service)

    assert order.id > 0
    assert order.status is OrderStatus.RECEIVED
    assert order.total == HAPPY_PATH_ORDER_TOTAL
    assert [(item.product_id, item.quantity, item.price) for item in order.items] == [
        (1, 2, Decimal("10.00")),
        (2, 1, Decimal("5.50")),
    ]
    assert all(item.order_id == order.id and item.id > 0 for item in order.items)
    assert memory_db.commits == 1


def test_item_price_is_a_snapshot(order_service, memory_db):
    order = _create(order_service)
    memory_db.tables.products[1].price = Decimal("99.00")

    reloaded = order_service.get_order(order.id)

    assert reloaded.items[0].price == Decimal("10.00")
    assert reloaded.total == HAPPY_PATH_ORDER_TOTAL


def test_guest_order_keeps_customer_id_zero(order_service):
    order = _create(order_service, GUEST_ORDER_PAYLOAD)

    assert order.customer_id == 0
    assert order.total == Decimal("6.00")


def test_unknown_product_aborts_without_persisting(memory_db):
    orders = SpyOrderStore(memory_db)
    service = OrderService(orders, InMemoryOrderItemStore(memory_db), InMemoryProductLookup(memory_db), memory_db)

    with pytest.raises(ProductNotFound):
        service.create_order(1, HAPPY_PATH_CPF, [{"product_id": 1, "quantity": 1}, {"product_id": 404, "quantity": 1}])

    assert orders.created == 0
    assert memory_db.tables.orders == {}


def test_product_lookup_failure_is_reported_as_not_found(memory_db):
    service = OrderService(
        InMemoryOrderStore(memory_db), InMemoryOrderItemStore(memory_db), BrokenProductLookup(), memory_db
    )

    with pytest.raises(ProductNotFound) as exc_info:
        service.create_order(1, HAPPY_PATH_CPF, [{"product_id": 1, "quantity": 1}])

    assert isinstance(exc_info.value.__cause__, PersistenceError)


def test_empty_order_fails_before_touching_stores(memory_db):
    orders = SpyOrderStore(memory_db)
    service = OrderService(orders, InMemoryOrderItemStore(memory_db), InMemoryProductLookup(memory_db), memory_db)

    with pytest.raises(InvalidOrder):
        service.create_order(1, HAPPY_PATH_CPF, [])

    assert orders.created == 0


def test_missing_cpf_is_invalid(order_service, memory_db):
    with pytest.raises(InvalidOrder):
        order_service.create_order(1, "  ", [{"product_id": 1, "quantity": 1}])

    assert memory_db.tables.orders == {}


@pytest.mark.parametrize("quantity", [0, -2, MAX_ITEM_QUANTITY + 1, 2**63])
def test_out_of_range_quantity_is_invalid_item(order_service, quantity):
    with pytest.raises(InvalidOrderItem):
        order_service.create_order(1, HAPPY_PATH_CPF, [{"product_id": 1, "quantity": quantity}])


def test_item_failure_rolls_back_whole_order(memory_db):
    service = OrderService(
        InMemoryOrderStore(memory_db),
        FailingItemStore(memory_db, fail_on_call=2),
        InMemoryProductLookup(memory_db),
        memory_db,
    )

    with pytest.raises(PersistenceError):
        _create(service)

    assert memory_db.tables.orders == {}
    assert memory_db.tables.items == {}
    assert memory_db.rollbacks == 1


def test_create_order_emits_event_after_commit(order_service):
    with patch("fastfood.services.orders.emit_order_created") as emit:
        order = _create(order_service)

    emit.assert_called_once_with(order)


def test_get_order_not_found(order_service):
    with pytest.raises(OrderNotFound):
        order_service.get_order(999)


def test_list_queries_attach_items(order_service):
    first = _create(order_service)
    second = _create(order_service, GUEST_ORDER_PAYLOAD)

    all_orders = order_service.list_orders()
    by_cpf = order_service.get_orders_by_cpf(HAPPY_PATH_CPF)
    by_customer = order_service.get_orders_by_customer(0)

    assert {order.id for order in all_orders} == {first.id, second.id}
    assert all(order.items for order in all_orders)
    assert [order.id for order in by_cpf] == [first.id]
    assert [order.id for order in by_customer] == [second.id]


def test_kitchen_skips_orders_whose_items_fail_to_load(memory_db):
    products = InMemoryProductLookup(memory_db)
    healthy = OrderService(InMemoryOrderStore(memory_db), InMemoryOrderItemStore(memory_db), products, memory_db)
    first = _create(healthy)
    second = _create(healthy, GUEST_ORDER_PAYLOAD)

    flaky = OrderService(
        InMemoryOrderStore(memory_db),
        FailingItemStore(memory_db, fail_on_call=0, fail_on_load={first.id}),
        products,
        memory_db,
    )

    assert [order.id for order in flaky.get_orders_for_kitchen()] == [second.id]


def test_kitchen_orders_by_priority(order_service):
    received = _create(order_service)
    in_progress = _create(order_service)
    ready = _create(order_service)
    done = _create(order_service)
    order_service.update_order_status(in_progress.id, "in_progress")
    order_service.update_order_status(ready.id, "ready")
    order_service.update_order_status(done.id, "completed")

    queue = order_service.get_orders_for_kitchen()

    assert [order.id for order in queue] == [ready.id, in_progress.id, received.id]
    assert all(order.items for order in queue)


def test_update_status_persists_and_emits(order_service):
    order = _create(order_service)

    with patch("fastfood.services.orders.emit_order_status_changed") as emit:
        updated = order_service.update_order_status(order.id, "READY")

    assert updated.status is OrderStatus.READY
    assert order_service.get_order(order.id).status is OrderStatus.READY
    emit.assert_called_once_with(updated, OrderStatus.RECEIVED)


def test_update_status_rejects_bogus_value_and_keeps_order(order_service):
    order = _create(order_service)

    with pytest.raises(InvalidStatus):
        order_service.update_order_status(order.id, "bogus")

    assert order_service.get_order(order.id).status is OrderStatus.RECEIVED


def test_update_status_unknown_order(order_service):
    with pytest.raises(OrderNotFound):
        order_service.update_order_status(404, "ready")


def test_unknown_order_is_reported_before_bad_status(order_service):
    with pytest.raises(OrderNotFound):
        order_service.update_order_status(404, "bogus")


def test_update_status_same_value_does_not_commit(order_service, memory_db):
    order = _create(order_service)
    commits = memory_db.commits

    with patch("fastfood.services.orders.emit_order_status_changed") as emit:
        order_service.update_order_status(order.id, "received")

    assert memory_db.commits == commits
    emit.assert_not_called()


def test_cancelled_order_cannot_be_reopened(order_service):
    order = _create(order_service)
    order_service.update_order_status(order.id, "cancelled")

    with pytest.raises(InvalidStatusTransition):
        order_service.update_order_status(order.id, "received")

    assert order_service.get_order(order.id).status is OrderStatus.CANCELLED


def test_update_item_quantity_recomputes_total(order_service):
    order = _create(order_service)
    item = order.items[0]

    updated = order_service.update_item_quantity(order.id, item.id, 3)

    assert updated.items[0].quantity == 3
    assert order_service.get_order(order.id).total == Decimal("35.50")


def test_update_item_quantity_validations(order_service):
    order = _create(order_service)

    with pytest.raises(OrderItemNotFound):
        order_service.update_item_quantity(order.id, 999, 1)
    with pytest.raises(InvalidOrderItem):
        order_service.update_item_quantity(order.id, order.items[0].id, 0)
    with pytest.raises(InvalidOrderItem):
        order_service.update_item_quantity(order.id, order.items[0].id, 2**63)

    assert order_service.get_order(order.id).items[0].quantity == 2


def test_delete_order_removes_items(order_service, memory_db):
    order = _create(order_service)

    order_service.delete_order(order.id)

    assert memory_db.tables.orders == {}
    assert memory_db.tables.items == {}
    with pytest.raises(OrderNotFound):
        order_service.delete_order(order.id)
