from __future__ import annotations

from fastfood.domain import Order, OrderStatus, Payment, PaymentStatus
from fastfood.services.event_bus import event_bus

ORDER_CREATED = "order.created"
ORDER_STATUS_CHANGED = "order.status.changed"
PAYMENT_CREATED = "payment.created"
PAYMENT_STATUS_CHANGED = "payment.status.changed"


def _status_value(status: OrderStatus | PaymentStatus | str | None) -> str | None:
    if status is None:
        return None
    return getattr(status, "value", status)


def build_order_payload(order: Order, previous_status: OrderStatus | None = None) -> dict:
    return {
        "order_id": order.id,
        "customer_id": order.customer_id,
        "cpf": order.cpf,
        "status": _status_value(order.status),
        "previous_status": _status_value(previous_status),
        "items_count": len(order.items),
        "total": str(order.total),
    }


def build_payment_payload(payment: Payment, previous_status: PaymentStatus | None = None) -> dict:
    return {
        "payment_id": payment.id,
        "order_id": payment.order_id,
        "status": _status_value(payment.status),
        "previous_status": _status_value(previous_status),
        "amount": str(payment.amount),
        "payment_method": payment.payment_method,
        "transaction_id": payment.transaction_id,
    }


def emit_order_created(order: Order) -> None:
    event_bus.emit(ORDER_CREATED, build_order_payload(order))


def emit_order_status_changed(order: Order, previous_status: OrderStatus | None) -> None:
    if previous_status == order.status:
        return
    event_bus.emit(ORDER_STATUS_CHANGED, build_order_payload(order, previous_status=previous_status))


def emit_payment_created(payment: Payment) -> None:
    event_bus.emit(PAYMENT_CREATED, build_payment_payload(payment))


def emit_payment_status_changed(payment: Payment, previous_status: PaymentStatus | None) -> None:
    if previous_status == payment.status:
        return
    event_bus.emit(PAYMENT_STATUS_CHANGED, build_payment_payload(payment, previous_status=previous_status))
