from __future__ import annotations

import logging

from fastfood.core.metrics import request_metrics
from fastfood.services.event_bus import event_bus
from fastfood.services.order_events import (
    ORDER_CREATED,
    ORDER_STATUS_CHANGED,
    PAYMENT_CREATED,
    PAYMENT_STATUS_CHANGED,
)

logger = logging.getLogger(__name__)


def handle_order_created(payload: dict) -> None:
    request_metrics.count_event(ORDER_CREATED)
    logger.info(
        "Order created items=%s total=%s",
        payload.get("items_count"),
        payload.get("total"),
        extra={"event": ORDER_CREATED, "order_id": payload["order_id"]},
    )


def handle_order_status_changed(payload: dict) -> None:
    request_metrics.count_event(ORDER_STATUS_CHANGED)
    logger.info(
        "Order status changed %s -> %s",
        payload.get("previous_status"),
        payload.get("status"),
        extra={"event": ORDER_STATUS_CHANGED, "order_id": payload["order_id"]},
    )


def handle_payment_created(payload: dict) -> None:
    request_metrics.count_event(PAYMENT_CREATED)
    logger.info(
        "Payment created amount=%s method=%s",
        payload.get("amount"),
        payload.get("payment_method"),
        extra={"event": PAYMENT_CREATED, "order_id": payload["order_id"]},
    )


def handle_payment_status_changed(payload: dict) -> None:
    request_metrics.count_event(PAYMENT_STATUS_CHANGED)
    logger.info(
        "Payment status changed %s -> %s",
        payload.get("previous_status"),
        payload.get("status"),
        extra={
            "event": PAYMENT_STATUS_CHANGED,
            "order_id": payload["order_id"],
            "transaction_id": payload.get("transaction_id") or None,
        },
    )


event_bus.subscribe(ORDER_CREATED, handle_order_created)
event_bus.subscribe(ORDER_STATUS_CHANGED, handle_order_status_changed)
event_bus.subscribe(PAYMENT_CREATED, handle_payment_created)
event_bus.subscribe(PAYMENT_STATUS_CHANGED, handle_payment_status_changed)
