from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Payment(SQLModel, table=True):
    __tablename__ = "payments"

    id: Optional[int] = Field(default=None, primary_key=True)

    order_id: int = Field(foreign_key="orders.id", index=True)
    user_id: int = Field(index=True)

    # gateway payment id; unique so a confirmation can only be recorded once
    txn_id: str = Field(index=True, unique=True)
    gateway_order_id: Optional[str] = None
    gateway_signature: Optional[str] = None

    amount: Decimal = Field(max_digits=10, decimal_places=2)
    status: str = Field(default="success")
    method: str = Field(default="razorpay")
    created_at: datetime = Field(default_factory=datetime.utcnow)
