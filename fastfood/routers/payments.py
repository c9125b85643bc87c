from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status

from fastfood.core.request_context import set_request_context
from fastfood.deps import get_payment_service
from fastfood.schemas.payments import (
    CheckoutRequest,
    CheckoutResponse,
    PaymentCreate,
    PaymentResponse,
    PaymentStatusResponse,
    WebhookPayload,
    WebhookResponse,
)
from fastfood.services.payments import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])

logger = logging.getLogger(__name__)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    payload: PaymentCreate,
    response: Response,
    service: PaymentService = Depends(get_payment_service),
):
    set_request_context(order_id=payload.order_id)
    payment, created = service.create_or_get_payment(payload.order_id, payload.amount, payload.payment_method)
    if not created:
        response.status_code = status.HTTP_200_OK
    return PaymentResponse.from_domain(payment)


@router.get("/status/{order_id}", response_model=PaymentStatusResponse)
def payment_status(order_id: int, service: PaymentService = Depends(get_payment_service)):
    return PaymentStatusResponse(order_id=order_id, status=service.get_payment_status(order_id).value)


@router.get("/transaction/{transaction_id}", response_model=PaymentResponse)
def payment_by_transaction(transaction_id: str, service: PaymentService = Depends(get_payment_service)):
    return PaymentResponse.from_domain(service.get_payment_by_transaction_id(transaction_id))


@router.post("/webhook", response_model=WebhookResponse)
def payment_webhook(payload: WebhookPayload, service: PaymentService = Depends(get_payment_service)):
    set_request_context(order_id=payload.order_id)
    logger.info(
        "Webhook received status=%s method=%s",
        payload.status,
        payload.payment_method,
        extra={"transaction_id": payload.transaction_id},
    )
    payment = service.process_webhook_payment(
        order_id=payload.order_id,
        status=payload.status,
        transaction_id=payload.transaction_id,
        amount=payload.amount,
    )
    return WebhookResponse(order_id=payment.order_id, payment_id=payment.id, status=payment.status.value)


@router.post("/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
def create_checkout(payload: CheckoutRequest, service: PaymentService = Depends(get_payment_service)):
    set_request_context(order_id=payload.order_id)
    result = service.create_checkout(payload.order_id, payload.email, payload.amount)
    return CheckoutResponse(
        order_id=result.order_id,
        payment_id=result.payment_id,
        ticket_url=result.ticket_url,
        provider_order_id=result.provider_order_id,
    )
