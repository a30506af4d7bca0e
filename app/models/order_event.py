from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class OrderEvent(SQLModel, table=True):
    """One entry of an order's timeline. Rows are only ever appended."""

    __tablename__ = "order_events"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    event_type: str = Field(index=True)
    label: str

    # order status once the event has been applied
    status: Optional[str] = None

    meta: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    created_by: str = Field(default="system")
    created_at: datetime = Field(default_factory=datetime.utcnow)
