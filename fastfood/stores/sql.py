"""SQLAlchemy-backed stores.

All stores of a request share one ``Session``. They only ``flush`` (to get
generated ids); committing or rolling back is the caller's job, through the
session acting as unit of work.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from fastfood.core.errors import OrderItemNotFound, OrderNotFound, PaymentAlreadyExists, PaymentNotFound, PersistenceError
from fastfood.domain import (
    KITCHEN_PRIORITY,
    KITCHEN_STATUSES,
    Order,
    OrderItem,
    Payment,
    PaymentStatus,
    Product,
    parse_order_status,
    to_money,
)
from fastfood.models.order import Order as OrderRow
from fastfood.models.order_item import OrderItem as OrderItemRow
from fastfood.models.payment import Payment as PaymentRow
from fastfood.models.product import Product as ProductRow

logger = logging.getLogger(__name__)


@contextmanager
def _guard(action: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Failed to %s: %s", action, exc)
        raise PersistenceError(f"failed to {action}") from exc


def _aware(value: datetime | None) -> datetime | None:
    # SQLite devolve datetimes sem timezone
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_order(row: OrderRow) -> Order:
    return Order(
        id=row.id,
        customer_id=row.customer_id or 0,
        cpf=row.cpf,
        status=parse_order_status(row.status),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_item(row: OrderItemRow) -> OrderItem:
    return OrderItem(
        id=row.id,
        order_id=row.order_id,
        product_id=row.product_id,
        quantity=row.quantity,
        price=to_money(row.price),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_payment(row: PaymentRow) -> Payment:
    return Payment(
        id=row.id,
        order_id=row.order_id,
        amount=to_money(row.amount),
        status=PaymentStatus(row.status),
        payment_method=row.payment_method,
        transaction_id=row.transaction_id or "",
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlProductLookup:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, product_id: int) -> Product | None:
        with _guard(f"load product {product_id}"):
            row = self.db.get(ProductRow, product_id)
        if row is None:
            return None
        return Product(
            id=row.id,
            name=row.name,
            price=to_money(row.price),
            category=row.category or "",
            description=row.description or "",
        )


class SqlOrderStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, order: Order) -> None:
        row = OrderRow(
            customer_id=order.customer_id or 0,
            cpf=order.cpf,
            status=order.status.value,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        with _guard("create order"):
            self.db.add(row)
            self.db.flush()
        order.id = row.id

    def get_by_id(self, order_id: int) -> Order | None:
        with _guard(f"load order {order_id}"):
            row = self.db.get(OrderRow, order_id)
        return _to_order(row) if row is not None else None

    def get_by_cpf(self, cpf: str) -> list[Order]:
        with _guard("list orders by cpf"):
            rows = (
                self.db.query(OrderRow)
                .filter(OrderRow.cpf == cpf)
                .order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
                .all()
            )
        return [_to_order(row) for row in rows]

    def get_by_customer_id(self, customer_id: int) -> list[Order]:
        with _guard("list orders by customer"):
            rows = (
                self.db.query(OrderRow)
                .filter(OrderRow.customer_id == customer_id)
                .order_by(OrderRow.created_at.desc(), OrderRow.id.desc())
                .all()
            )
        return [_to_order(row) for row in rows]

    def get_all(self) -> list[Order]:
        with _guard("list orders"):
            rows = self.db.query(OrderRow).order_by(OrderRow.created_at.desc(), OrderRow.id.desc()).all()
        return [_to_order(row) for row in rows]

    def get_pending_orders_for_kitchen(self) -> list[Order]:
        priority = case(
            *[(OrderRow.status == status.value, rank) for status, rank in KITCHEN_PRIORITY.items()],
            else_=len(KITCHEN_PRIORITY),
        )
        with _guard("list kitchen orders"):
            rows = (
                self.db.query(OrderRow)
                .filter(OrderRow.status.in_([status.value for status in KITCHEN_STATUSES]))
                .order_by(priority, OrderRow.created_at.asc(), OrderRow.id.asc())
                .all()
            )
        return [_to_order(row) for row in rows]

    def update(self, order: Order) -> None:
        with _guard(f"update order {order.id}"):
            row = self.db.get(OrderRow, order.id)
            if row is None:
                raise OrderNotFound(order.id)
            row.customer_id = order.customer_id or 0
            row.cpf = order.cpf
            row.status = order.status.value
            row.updated_at = order.updated_at
            self.db.flush()

    def delete(self, order_id: int) -> None:
        with _guard(f"delete order {order_id}"):
            self.db.query(OrderItemRow).filter(OrderItemRow.order_id == order_id).delete(synchronize_session=False)
            self.db.query(PaymentRow).filter(PaymentRow.order_id == order_id).delete(synchronize_session=False)
            self.db.query(OrderRow).filter(OrderRow.id == order_id).delete(synchronize_session=False)
            self.db.flush()
        # drop stale instances still cached in the identity map
        self.db.expire_all()


class SqlOrderItemStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, item: OrderItem) -> None:
        row = OrderItemRow(
            order_id=item.order_id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=to_money(item.price),
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
        with _guard(f"create item for order {item.order_id}"):
            self.db.add(row)
            self.db.flush()
        item.id = row.id

    def get_by_order_id(self, order_id: int) -> list[OrderItem]:
        with _guard(f"load items of order {order_id}"):
            rows = (
                self.db.query(OrderItemRow)
                .filter(OrderItemRow.order_id == order_id)
                .order_by(OrderItemRow.id.asc())
                .all()
            )
        return [_to_item(row) for row in rows]

    def update(self, item: OrderItem) -> None:
        with _guard(f"update item {item.id}"):
            row = self.db.get(OrderItemRow, item.id)
            if row is None:
                raise OrderItemNotFound(item.order_id, item.id)
            row.quantity = item.quantity
            row.price = to_money(item.price)
            row.updated_at = item.updated_at
            self.db.flush()

    def delete(self, item_id: int) -> None:
        with _guard(f"delete item {item_id}"):
            self.db.query(OrderItemRow).filter(OrderItemRow.id == item_id).delete(synchronize_session=False)
            self.db.flush()


class SqlPaymentStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, payment: Payment) -> None:
        row = PaymentRow(
            order_id=payment.order_id,
            amount=to_money(payment.amount),
            status=payment.status.value,
            payment_method=payment.payment_method,
            transaction_id=payment.transaction_id or "",
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )
        self.db.add(row)
        try:
            self.db.flush()
        except IntegrityError as exc:
            logger.warning("Duplicate payment rejected order_id=%s", payment.order_id)
            raise PaymentAlreadyExists(payment.order_id) from exc
        except SQLAlchemyError as exc:
            logger.error("Failed to create payment: %s", exc)
            raise PersistenceError("failed to create payment") from exc
        payment.id = row.id

    def get_by_id(self, payment_id: int) -> Payment | None:
        with _guard(f"load payment {payment_id}"):
            row = self.db.get(PaymentRow, payment_id)
        return _to_payment(row) if row is not None else None

    def get_by_order_id(self, order_id: int) -> Payment | None:
        with _guard(f"load payment of order {order_id}"):
            row = self.db.query(PaymentRow).filter(PaymentRow.order_id == order_id).first()
        return _to_payment(row) if row is not None else None

    def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        with _guard("load payment by transaction"):
            row = (
                self.db.query(PaymentRow)
                .filter(PaymentRow.transaction_id == str(transaction_id))
                .order_by(PaymentRow.updated_at.desc())
                .first()
            )
        return _to_payment(row) if row is not None else None

    def update(self, payment: Payment) -> None:
        with _guard(f"update payment {payment.id}"):
            row = self.db.get(PaymentRow, payment.id)
            if row is None:
                raise PaymentNotFound(order_id=payment.order_id)
            row.amount = to_money(payment.amount)
            row.status = payment.status.value
            row.payment_method = payment.payment_method
            row.transaction_id = payment.transaction_id or ""
            row.updated_at = payment.updated_at
            self.db.flush()

    def delete(self, payment_id: int) -> None:
        with _guard(f"delete payment {payment_id}"):
            self.db.query(PaymentRow).filter(PaymentRow.id == payment_id).delete(synchronize_session=False)
            self.db.flush()
