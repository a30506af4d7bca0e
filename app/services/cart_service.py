import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete
from sqlmodel import Session, select

from app.exceptions import EmptyCart, InsufficientStock
from app.models.cart import CartItem
from app.models.product import Product

logger = logging.getLogger(__name__)

CartLine = Tuple[CartItem, Product]


class CartRepository:
    """
    Cart persistence for one database session.

    None of the methods commit; callers own the transaction so the cart can
    be cleared atomically with order creation.
    """

    def __init__(self, session: Session):
        self.session = session

    def list_with_products(self, user_id: int) -> List[CartLine]:
        """Cart rows joined with their products in one query, oldest first."""
        rows = self.session.exec(
            select(CartItem, Product)
            .join(Product, CartItem.product_id == Product.id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        ).all()
        return [(item, product) for item, product in rows]

    def get_item(self, user_id: int, item_id: int) -> Optional[CartItem]:
        item = self.session.get(CartItem, item_id)
        if not item or item.user_id != user_id:
            return None
        return item

    def add(self, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        existing_item = self.session.exec(
            select(CartItem).where(
                CartItem.user_id == user_id,
                CartItem.product_id == product_id,
            )
        ).first()

        if existing_item:
            existing_item.quantity += quantity
            self.session.add(existing_item)
            return existing_item

        new_item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        self.session.add(new_item)
        return new_item

    def update_quantity(self, item: CartItem, quantity: int) -> Optional[CartItem]:
        """Set the quantity; zero or less removes the row and returns None."""
        if quantity <= 0:
            self.session.delete(item)
            return None

        item.quantity = quantity
        self.session.add(item)
        return item

    def remove(self, item: CartItem) -> None:
        self.session.delete(item)

    def clear(self, user_id: int) -> int:
        result = self.session.execute(
            delete(CartItem).where(CartItem.user_id == user_id)
        )
        return result.rowcount


def read_cart_snapshot(session: Session, user_id: int) -> List[CartLine]:
    """Current cart with products attached; fails on an empty cart or short stock."""
    lines = CartRepository(session).list_with_products(user_id)

    if not lines:
        raise EmptyCart()

    for item, product in lines:
        if item.quantity > product.stock:
            raise InsufficientStock(product.name, product.stock, item.quantity)

    logger.info(f"Cart snapshot for user {user_id}: {len(lines)} lines")
    return lines
