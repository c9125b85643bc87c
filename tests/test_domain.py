from decimal import Decimal

import pytest

from fastfood.core.errors import (
    InvalidOrderItem,
    InvalidPaymentStatus,
    InvalidStatus,
    InvalidStatusTransition,
)
from fastfood.domain import (
    MAX_ITEM_QUANTITY,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    parse_order_status,
    parse_webhook_status,
    to_money,
)


def _order(*items):
    order = Order(cpf="123")
    for product_id, quantity, price in items:
        order.add_item(OrderItem(product_id=product_id, quantity=quantity, price=Decimal(price)))
    return order


def test_order_total_is_sum_of_subtotals():
    order = _order((1, 2, "10.00"), (2, 1, "5.50"))

    assert order.total == Decimal("25.50")
    assert [item.subtotal for item in order.items] == [Decimal("20.00"), Decimal("5.50")]


def test_order_requires_items_and_cpf():
    assert not Order(cpf="123").is_valid()
    assert not Order(cpf="   ", items=[OrderItem(product_id=1, quantity=1, price=Decimal("1.00"))]).is_valid()
    assert _order((1, 1, "1.00")).is_valid()


def test_guest_order_with_zero_customer_id_is_valid():
    order = _order((1, 1, "3.00"))

    assert order.customer_id == 0
    assert order.is_valid()


@pytest.mark.parametrize(
    "product_id,quantity,price",
    [(0, 1, "1.00"), (1, 0, "1.00"), (1, 1, "0.00"), (-1, 2, "1.00")],
)
def test_order_item_validation_rejects_non_positive_fields(product_id, quantity, price):
    assert not OrderItem(product_id=product_id, quantity=quantity, price=Decimal(price)).is_valid()


def test_update_quantity_rejects_zero():
    item = OrderItem(product_id=1, quantity=2, price=Decimal("4.00"))

    with pytest.raises(InvalidOrderItem):
        item.update_quantity(0)
    assert item.quantity == 2


def test_quantity_is_capped():
    item = OrderItem(product_id=1, quantity=MAX_ITEM_QUANTITY, price=Decimal("1.00"))

    assert item.is_valid()
    assert not OrderItem(product_id=1, quantity=MAX_ITEM_QUANTITY + 1, price=Decimal("1.00")).is_valid()
    with pytest.raises(InvalidOrderItem):
        item.update_quantity(2**63)
    assert item.quantity == MAX_ITEM_QUANTITY


def test_parse_order_status_normalizes_input():
    assert parse_order_status("  IN_PROGRESS ") is OrderStatus.IN_PROGRESS
    assert parse_order_status(OrderStatus.READY) is OrderStatus.READY


@pytest.mark.parametrize("value", ["bogus", "preparation", "", None])
def test_parse_order_status_rejects_unknown_values(value):
    with pytest.raises(InvalidStatus):
        parse_order_status(value)


def test_update_status_same_status_is_noop():
    order = _order((1, 1, "1.00"))
    before = order.updated_at

    assert order.update_status(OrderStatus.RECEIVED) is False
    assert order.updated_at == before


def test_update_status_allows_any_step_from_non_terminal():
    order = _order((1, 1, "1.00"))

    assert order.update_status(OrderStatus.READY)
    assert order.update_status(OrderStatus.IN_PROGRESS)
    assert order.update_status(OrderStatus.CANCELLED)
    assert order.is_terminal


@pytest.mark.parametrize("terminal", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
def test_terminal_orders_never_leave_their_state(terminal):
    order = _order((1, 1, "1.00"))
    order.update_status(terminal)

    with pytest.raises(InvalidStatusTransition):
        order.update_status(OrderStatus.RECEIVED)
    assert order.status is terminal
    assert order.update_status(terminal) is False


@pytest.mark.parametrize("value", ["approved", "REJECTED", " canceled "])
def test_parse_webhook_status_accepts_final_statuses(value):
    assert parse_webhook_status(value) in {PaymentStatus.APPROVED, PaymentStatus.REJECTED, PaymentStatus.CANCELED}


@pytest.mark.parametrize("value", ["pending", "foo", "", None])
def test_parse_webhook_status_rejects_other_values(value):
    with pytest.raises(InvalidPaymentStatus):
        parse_webhook_status(value)


def test_to_money_rounds_half_up_to_cents():
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(5.5) == Decimal("5.50")
    assert to_money(3) == Decimal("3.00")


def test_to_money_rejects_garbage():
    with pytest.raises(ValueError):
        to_money("abc")
    with pytest.raises(ValueError):
        to_money("1e30")
