from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from fastfood.deps import get_order_service
from fastfood.schemas.orders import (
    OrderCreate,
    OrderItemQuantityUpdate,
    OrderResponse,
    OrderStatusUpdate,
)
from fastfood.services.orders import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, service: OrderService = Depends(get_order_service)):
    order = service.create_order(
        customer_id=payload.customer_id or 0,
        cpf=payload.cpf,
        items=payload.items,
    )
    return OrderResponse.from_domain(order)


@router.get("", response_model=list[OrderResponse])
def list_orders(service: OrderService = Depends(get_order_service)):
    return [OrderResponse.from_domain(order) for order in service.list_orders()]


@router.get("/kitchen", response_model=list[OrderResponse])
def kitchen_queue(service: OrderService = Depends(get_order_service)):
    return [OrderResponse.from_domain(order) for order in service.get_orders_for_kitchen()]


@router.get("/cpf/{cpf}", response_model=list[OrderResponse])
def orders_by_cpf(cpf: str, service: OrderService = Depends(get_order_service)):
    return [OrderResponse.from_domain(order) for order in service.get_orders_by_cpf(cpf)]


@router.get("/customer/{customer_id}", response_model=list[OrderResponse])
def orders_by_customer(customer_id: int, service: OrderService = Depends(get_order_service)):
    return [OrderResponse.from_domain(order) for order in service.get_orders_by_customer(customer_id)]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    return OrderResponse.from_domain(service.get_order(order_id))


@router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service),
):
    return OrderResponse.from_domain(service.update_order_status(order_id, payload.status))


@router.patch("/{order_id}/items/{item_id}", response_model=OrderResponse)
def update_item_quantity(
    order_id: int,
    item_id: int,
    payload: OrderItemQuantityUpdate,
    service: OrderService = Depends(get_order_service),
):
    return OrderResponse.from_domain(service.update_item_quantity(order_id, item_id, payload.quantity))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(order_id: int, service: OrderService = Depends(get_order_service)):
    service.delete_order(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
