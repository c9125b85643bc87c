from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from fastfood.core.config import MERCADOPAGO_ACCESS_TOKEN, IS_PROD
from fastfood.core.database import get_db
from fastfood.integrations.base import CheckoutGateway
from fastfood.integrations.mercadopago import MercadoPagoClient
from fastfood.integrations.mock import MockCheckoutGateway
from fastfood.services.orders import OrderService
from fastfood.services.payments import PaymentService
from fastfood.stores.sql import SqlOrderItemStore, SqlOrderStore, SqlPaymentStore, SqlProductLookup


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(
        orders=SqlOrderStore(db),
        items=SqlOrderItemStore(db),
        products=SqlProductLookup(db),
        uow=db,
    )


def get_checkout_gateway() -> CheckoutGateway:
    # sem token fora de produção usa o gateway local
    if MERCADOPAGO_ACCESS_TOKEN or IS_PROD:
        return MercadoPagoClient()
    return MockCheckoutGateway()


def get_payment_service(
    db: Session = Depends(get_db),
    checkout_gateway: CheckoutGateway = Depends(get_checkout_gateway),
) -> PaymentService:
    return PaymentService(
        payments=SqlPaymentStore(db),
        orders=SqlOrderStore(db),
        uow=db,
        checkout_gateway=checkout_gateway,
    )
