from __future__ import annotations


class FastFoodError(Exception):
    """Base error raised by the ordering core.

    ``kind`` lets the HTTP layer map an error to a status code without
    knowing every concrete subclass.
    """

    kind = "internal"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FastFoodError):
    kind = "not_found"
    http_status = 404


class ValidationError(FastFoodError):
    kind = "validation"
    http_status = 400


class ConflictError(FastFoodError):
    kind = "conflict"
    http_status = 409


class UpstreamError(FastFoodError):
    kind = "upstream"
    http_status = 502


class PersistenceError(FastFoodError):
    kind = "internal"
    http_status = 500


class OrderNotFound(NotFoundError):
    def __init__(self, order_id: int):
        super().__init__(f"order {order_id} not found")
        self.order_id = order_id


class OrderItemNotFound(NotFoundError):
    def __init__(self, order_id: int, item_id: int):
        super().__init__(f"item {item_id} not found in order {order_id}")
        self.order_id = order_id
        self.item_id = item_id


class ProductNotFound(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__(f"product {product_id} not found")
        self.product_id = product_id


class PaymentNotFound(NotFoundError):
    def __init__(self, order_id: int | None = None, transaction_id: str | None = None):
        if transaction_id is not None:
            message = f"payment with transaction {transaction_id} not found"
        else:
            message = f"payment not found for order {order_id}"
        super().__init__(message)
        self.order_id = order_id
        self.transaction_id = transaction_id


class InvalidOrder(ValidationError):
    pass


class InvalidOrderItem(ValidationError):
    pass


class InvalidStatus(ValidationError):
    def __init__(self, status: object):
        super().__init__(f"invalid order status: {status!r}")
        self.status = status


class InvalidPaymentStatus(ValidationError):
    def __init__(self, status: object):
        super().__init__(f"invalid payment status received: {status!r}")
        self.status = status


class InvalidPayment(ValidationError):
    pass


class InvalidStatusTransition(ConflictError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"cannot move order from {current} to {requested}")
        self.current = current
        self.requested = requested


class PaymentAlreadyExists(ConflictError):
    def __init__(self, order_id: int):
        super().__init__(f"payment already exists for order {order_id}")
        self.order_id = order_id


class PaymentProviderError(UpstreamError):
    def __init__(self, message: str, status_code: int | None = None, body_text: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body_text = body_text
