from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.dependencies.context import RequestContext, get_request_context
from app.models.product import Product
from app.schemas.cart_schemas import (
    CartAddRequest,
    CartItemRead,
    CartLineRead,
    CartUpdateRequest,
    ProductRead,
)
from app.services.cart_service import CartRepository

router = APIRouter()

# View Cart

@router.get("", response_model=List[CartLineRead])
def get_cart(ctx: RequestContext = Depends(get_request_context)):
    lines = CartRepository(ctx.session).list_with_products(ctx.user.id)

    return [
        CartLineRead(
            **CartItemRead.model_validate(item).model_dump(),
            product=ProductRead.model_validate(product),
        )
        for item, product in lines
    ]

# Add to Cart

@router.post("", response_model=CartItemRead)
def add_to_cart(data: CartAddRequest, ctx: RequestContext = Depends(get_request_context)):
    product = ctx.session.get(Product, data.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    item = CartRepository(ctx.session).add(ctx.user.id, product.id, data.quantity)
    ctx.session.commit()
    ctx.session.refresh(item)

    return item

# Update Cart

@router.patch("/{item_id}", response_model=CartItemRead, responses={204: {"description": "Item removed"}})
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    repo = CartRepository(ctx.session)
    item = repo.get_item(ctx.user.id, item_id)
    if not item:
        raise HTTPException(404, "Cart item not found")

    updated = repo.update_quantity(item, data.quantity)
    ctx.session.commit()

    if updated is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    ctx.session.refresh(updated)
    return updated

# Remove Cart

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(item_id: int, ctx: RequestContext = Depends(get_request_context)):
    repo = CartRepository(ctx.session)
    item = repo.get_item(ctx.user.id, item_id)
    if not item:
        raise HTTPException(404, "Item not found")

    repo.remove(item)
    ctx.session.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
