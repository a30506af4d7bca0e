from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.constants.order_status import OrderStatus
from app.models.order_item import OrderItem
from app.models.user import User


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)

    total_amount: Decimal = Field(max_digits=10, decimal_places=2)

    status: str = Field(default=OrderStatus.pending.value, index=True)
    payment_mode: str  # cod | gateway
    payment_id: Optional[str] = Field(default=None, index=True)  # gateway order reference

    # snapshot of the shipping address at checkout time
    address: dict = Field(sa_column=Column(JSON, nullable=False))

    created_at: datetime = Field(default_factory=datetime.utcnow)

    user: Optional["User"] = Relationship()
    items: List["OrderItem"] = Relationship(back_populates="order")
