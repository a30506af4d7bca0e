from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    description: str
    category: str = Field(index=True)
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    price: Decimal = Field(max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    is_cod_available: bool = True
    stock: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
