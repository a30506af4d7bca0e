from typing import Optional


class OrderError(Exception):
    """Base class for order/payment errors that map onto an HTTP response."""

    status_code = 400
    message = "Order request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class EmptyCart(OrderError):
    message = "Cart is empty"


class InsufficientStock(OrderError):
    def __init__(self, product_name: str, available: int, requested: int):
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class OrderNotFound(OrderError):
    status_code = 404
    message = "Order not found"


class InvalidSignature(OrderError):
    # never include the expected signature in the message
    message = "Invalid payment signature"


class IllegalTransition(OrderError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid status change from {current} to {requested}")


class OrderConflict(OrderError):
    status_code = 409
    message = "Order was modified by another request"


class GatewayUnavailable(OrderError):
    status_code = 503
    message = "Payment gateway is unavailable"

    def __init__(self, message: Optional[str] = None, order_id: Optional[int] = None):
        self.order_id = order_id
        super().__init__(message)
