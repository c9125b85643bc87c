from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from fastfood.core.errors import (
    InvalidPayment,
    OrderNotFound,
    PaymentAlreadyExists,
    PaymentNotFound,
    PaymentProviderError,
)
from fastfood.domain import OrderStatus, Payment, PaymentStatus, parse_webhook_status, to_money
from fastfood.integrations.base import CheckoutGateway
from fastfood.integrations.mercadopago import build_checkout_request, extract_ticket_url
from fastfood.services.order_events import (
    emit_order_status_changed,
    emit_payment_created,
    emit_payment_status_changed,
)
from fastfood.stores.base import OrderStore, PaymentStore, UnitOfWork

logger = logging.getLogger(__name__)

CHECKOUT_PAYMENT_METHOD = "pix"


@dataclass
class CheckoutResult:
    order_id: int
    payment_id: int
    ticket_url: str
    provider_order_id: str | None = None


def _parse_amount(amount) -> Decimal:
    try:
        return to_money(amount)
    except ValueError as exc:
        raise InvalidPayment(f"invalid amount: {amount!r}") from exc


def _positive_amount(amount) -> Decimal:
    value = _parse_amount(amount)
    if value <= 0:
        raise InvalidPayment("amount must be greater than zero")
    return value


class PaymentService:
    def __init__(
        self,
        payments: PaymentStore,
        orders: OrderStore,
        uow: UnitOfWork,
        checkout_gateway: CheckoutGateway | None = None,
    ) -> None:
        self.payments = payments
        self.orders = orders
        self.uow = uow
        self.checkout_gateway = checkout_gateway

    def create_payment(self, order_id: int, amount, payment_method: str) -> Payment:
        payment, _ = self.create_or_get_payment(order_id, amount, payment_method)
        return payment

    def create_or_get_payment(self, order_id: int, amount, payment_method: str) -> tuple[Payment, bool]:
        """Return the payment of ``order_id``, creating a pending one if none exists.

        A retried or concurrent request for the same order gets the already
        stored payment back, unchanged. The flag tells whether this call
        created it.
        """
        value = _positive_amount(amount)
        method = (payment_method or "").strip()
        if not method:
            raise InvalidPayment("payment_method is required")

        if self.orders.get_by_id(order_id) is None:
            raise OrderNotFound(order_id)

        existing = self.payments.get_by_order_id(order_id)
        if existing is not None:
            logger.info("Reusing existing payment id=%s", existing.id, extra={"order_id": order_id})
            return existing, False

        payment = Payment(order_id=order_id, amount=value, payment_method=method)
        try:
            self.payments.create(payment)
            self.uow.commit()
        except PaymentAlreadyExists:
            # lost the race against a concurrent request for the same order
            self.uow.rollback()
            existing = self.payments.get_by_order_id(order_id)
            if existing is None:
                raise
            logger.info("Concurrent payment creation resolved id=%s", existing.id, extra={"order_id": order_id})
            return existing, False
        except Exception:
            self.uow.rollback()
            raise

        logger.info("Payment created id=%s amount=%s", payment.id, payment.amount, extra={"order_id": order_id})
        emit_payment_created(payment)
        return payment, True

    def process_webhook_payment(
        self,
        order_id: int,
        status: str,
        transaction_id: str | int | None,
        amount=None,
    ) -> Payment:
        """Apply a provider status callback to the payment of ``order_id``.

        The payment update and, for approvals, the move of the order from
        ``received`` to ``in_progress`` are committed together. Re-delivering
        the same callback changes nothing.
        """
        payment = self.payments.get_by_order_id(order_id)
        if payment is None:
            raise PaymentNotFound(order_id=order_id)

        new_status = parse_webhook_status(status)
        transaction = str(transaction_id) if transaction_id is not None else ""

        if payment.status == new_status and payment.transaction_id == transaction:
            logger.info(
                "Duplicate webhook ignored status=%s",
                new_status.value,
                extra={"order_id": order_id, "transaction_id": transaction},
            )
            return payment

        reported_amount = _parse_amount(amount) if amount is not None else None
        if reported_amount is not None and reported_amount != payment.amount:
            logger.warning(
                "Webhook amount %s differs from payment amount %s",
                reported_amount,
                payment.amount,
                extra={"order_id": order_id, "transaction_id": transaction},
            )

        previous_payment_status = payment.status
        payment.update_status(new_status, transaction)

        order = None
        previous_order_status = None
        try:
            self.payments.update(payment)
            if payment.is_approved:
                order = self.orders.get_by_id(order_id)
                if order is None:
                    raise OrderNotFound(order_id)
                previous_order_status = order.status
                if order.status == OrderStatus.RECEIVED and order.update_status(OrderStatus.IN_PROGRESS):
                    self.orders.update(order)
                else:
                    order = None
            self.uow.commit()
        except Exception:
            self.uow.rollback()
            logger.exception("Webhook processing failed", extra={"order_id": order_id})
            raise

        logger.info(
            "Payment status updated %s -> %s",
            previous_payment_status.value,
            new_status.value,
            extra={"order_id": order_id, "transaction_id": transaction},
        )
        emit_payment_status_changed(payment, previous_payment_status)
        if order is not None:
            emit_order_status_changed(order, previous_order_status)
        return payment

    def get_payment(self, order_id: int) -> Payment:
        payment = self.payments.get_by_order_id(order_id)
        if payment is None:
            raise PaymentNotFound(order_id=order_id)
        return payment

    def get_payment_status(self, order_id: int) -> PaymentStatus:
        return self.get_payment(order_id).status

    def get_payment_by_transaction_id(self, transaction_id: str) -> Payment:
        transaction = str(transaction_id or "").strip()
        payment = self.payments.get_by_transaction_id(transaction) if transaction else None
        if payment is None:
            raise PaymentNotFound(transaction_id=transaction)
        return payment

    def create_checkout(self, order_id: int, email: str, amount) -> CheckoutResult:
        """Start a hosted pix checkout for ``order_id`` and return its ticket URL."""
        if self.checkout_gateway is None:
            raise PaymentProviderError("payment provider is not configured")
        payer_email = (email or "").strip()
        if not payer_email:
            raise InvalidPayment("payer email is required")

        payment = self.create_payment(order_id, amount, CHECKOUT_PAYMENT_METHOD)
        if not payment.is_pending:
            raise PaymentAlreadyExists(order_id)

        request = build_checkout_request(order_id, payer_email, payment.amount)
        response = self.checkout_gateway.create_checkout_order(request)
        ticket_url = extract_ticket_url(response)

        provider_order_id = response.get("id")
        logger.info("Checkout created provider_order=%s", provider_order_id, extra={"order_id": order_id})
        return CheckoutResult(
            order_id=order_id,
            payment_id=payment.id,
            ticket_url=ticket_url,
            provider_order_id=str(provider_order_id) if provider_order_id is not None else None,
        )
