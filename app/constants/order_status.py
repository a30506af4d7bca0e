from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    cod_confirmed = "cod_confirmed"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentMode(str, Enum):
    cod = "cod"
    gateway = "gateway"


ALLOWED_TRANSITIONS = {
    OrderStatus.pending: [OrderStatus.paid, OrderStatus.cod_confirmed, OrderStatus.cancelled],
    OrderStatus.paid: [OrderStatus.shipped, OrderStatus.cancelled],
    OrderStatus.cod_confirmed: [OrderStatus.shipped, OrderStatus.cancelled],
    OrderStatus.shipped: [OrderStatus.delivered],
    OrderStatus.delivered: [],
    OrderStatus.cancelled: [],
}

TERMINAL_STATUSES = {
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
}

# Only the payment verification gate may move an order to these
GATEWAY_ONLY_STATUSES = {OrderStatus.paid}
