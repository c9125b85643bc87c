from datetime import datetime, timedelta, timezone

from fastfood.domain import Order, OrderStatus
from fastfood.services.kitchen import build_kitchen_queue

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _order(order_id, status, minutes):
    return Order(id=order_id, cpf="123", status=status, created_at=BASE + timedelta(minutes=minutes))


def test_ready_first_then_in_progress_then_received_oldest_first():
    orders = [
        _order(1, OrderStatus.RECEIVED, 0),
        _order(2, OrderStatus.IN_PROGRESS, 5),
        _order(3, OrderStatus.READY, 10),
        _order(4, OrderStatus.READY, 2),
        _order(5, OrderStatus.RECEIVED, -3),
        _order(6, OrderStatus.IN_PROGRESS, 1),
    ]

    queue = build_kitchen_queue(orders)

    assert [order.id for order in queue] == [4, 3, 6, 2, 5, 1]


def test_completed_and_cancelled_orders_never_appear():
    orders = [
        _order(1, OrderStatus.COMPLETED, 0),
        _order(2, OrderStatus.CANCELLED, 1),
        _order(3, OrderStatus.RECEIVED, 2),
    ]

    assert [order.id for order in build_kitchen_queue(orders)] == [3]


def test_same_timestamp_is_broken_by_id():
    orders = [_order(9, OrderStatus.RECEIVED, 0), _order(2, OrderStatus.RECEIVED, 0)]

    assert [order.id for order in build_kitchen_queue(orders)] == [2, 9]


def test_empty_input_gives_empty_queue():
    assert build_kitchen_queue([]) == []
