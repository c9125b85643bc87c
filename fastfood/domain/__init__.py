from fastfood.domain.catalog import Product
from fastfood.domain.money import to_money
from fastfood.domain.order import (
    KITCHEN_PRIORITY,
    KITCHEN_STATUSES,
    MAX_ITEM_QUANTITY,
    TERMINAL_STATUSES,
    Order,
    OrderItem,
    OrderStatus,
    parse_order_status,
    utcnow,
)
from fastfood.domain.payment import WEBHOOK_STATUSES, Payment, PaymentStatus, parse_webhook_status
