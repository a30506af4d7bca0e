from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CartModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CartAddRequest(CartModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)

class CartUpdateRequest(CartModel):
    quantity: int


class ProductRead(CartModel):
    id: int
    name: str
    slug: str
    price: Decimal
    original_price: Optional[Decimal] = None
    category: str
    images: List[str] = []
    is_cod_available: bool
    stock: int


class CartItemRead(CartModel):
    id: int
    user_id: int
    product_id: int
    quantity: int


class CartLineRead(CartItemRead):
    product: ProductRead
