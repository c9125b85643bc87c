from __future__ import annotations

from typing import Iterable

from fastfood.domain import KITCHEN_PRIORITY, KITCHEN_STATUSES, Order


def kitchen_sort_key(order: Order) -> tuple:
    return (KITCHEN_PRIORITY[order.status], order.created_at, order.id)


def build_kitchen_queue(orders: Iterable[Order]) -> list[Order]:
    """Orders still in flight, nearest to completion first, oldest first within a status."""
    in_flight = [order for order in orders if order.status in KITCHEN_STATUSES]
    return sorted(in_flight, key=kitchen_sort_key)
