from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.constants.order_status import OrderStatus, PaymentMode
from app.schemas.address_schemas import AddressSnapshot
from app.schemas.user_schemas import UserRead


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -------- Requests --------

class OrderCreate(CamelModel):
    # display hint only; the server always recomputes the total
    total_amount: Optional[Decimal] = None
    payment_mode: PaymentMode
    address: AddressSnapshot

    @field_validator("payment_mode", mode="before")
    @classmethod
    def normalize_payment_mode(cls, value):
        # older clients send the gateway name instead of the mode
        if value == "razorpay":
            return PaymentMode.gateway
        return value


class VerifyPaymentRequest(CamelModel):
    razorpay_payment_id: str
    razorpay_signature: str


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


# -------- Responses --------

class OrderItemRead(CamelModel):
    id: int
    product_id: int
    quantity: int
    price: Decimal


class OrderRead(CamelModel):
    id: int
    user_id: int
    status: OrderStatus
    total_amount: Decimal
    payment_mode: PaymentMode
    payment_id: Optional[str] = None
    address: dict
    created_at: datetime


class OrderDetailRead(OrderRead):
    items: List[OrderItemRead] = []


class PlacedOrderRead(OrderRead):
    razorpay_order_id: Optional[str] = None
    razorpay_key_id: Optional[str] = None


class VerifyPaymentResponse(CamelModel):
    status: str = "success"
    order_id: int
    order_status: OrderStatus
    txn_id: Optional[str] = None
    already_processed: bool = False


class OrderEventRead(CamelModel):
    id: str
    event_type: str
    label: str
    status: Optional[str] = None
    meta: Optional[dict] = None
    created_by: str
    created_at: datetime


class AdminOrderRead(OrderRead):
    user: Optional[UserRead] = None


class AdminOrderDetailRead(AdminOrderRead):
    items: List[OrderItemRead] = []
    events: List[OrderEventRead] = []
