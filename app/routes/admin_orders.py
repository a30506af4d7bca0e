# -------- ADMIN ORDERS --------
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import select

from app.constants.order_status import OrderStatus
from app.dependencies.context import RequestContext, get_admin_context
from app.exceptions import OrderNotFound
from app.models.order import Order
from app.models.user import User
from app.schemas.orders_schemas import (
    AdminOrderDetailRead,
    AdminOrderRead,
    OrderEventRead,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
)
from app.schemas.user_schemas import UserRead
from app.services.order_event_service import list_order_events
from app.services.order_status import admin_transition

router = APIRouter()


def _admin_order(order: Order, user: Optional[User]) -> AdminOrderRead:
    return AdminOrderRead(
        **OrderRead.model_validate(order).model_dump(),
        user=UserRead.model_validate(user) if user else None,
    )


@router.get("", response_model=List[AdminOrderRead])
def list_orders(
    user_id: Optional[int] = Query(None, alias="userId"),
    status: Optional[OrderStatus] = None,
    ctx: RequestContext = Depends(get_admin_context),
):
    query = (
        select(Order, User)
        .join(User, User.id == Order.user_id)
    )

    if user_id is not None:
        query = query.where(Order.user_id == user_id)

    if status:
        query = query.where(Order.status == status.value)

    rows = ctx.session.exec(
        query.order_by(Order.created_at.desc(), Order.id.desc())
    ).all()

    return [_admin_order(o, u) for o, u in rows]


@router.get("/{order_id}", response_model=AdminOrderDetailRead)
def order_details(order_id: int, ctx: RequestContext = Depends(get_admin_context)):
    result = ctx.session.exec(
        select(Order, User)
        .join(User, User.id == Order.user_id)
        .where(Order.id == order_id)
    ).first()

    if not result:
        raise OrderNotFound()

    order, user = result

    return AdminOrderDetailRead(
        **_admin_order(order, user).model_dump(),
        items=[OrderItemRead.model_validate(i) for i in order.items],
        events=[OrderEventRead.model_validate(e) for e in list_order_events(ctx.session, order.id)],
    )


@router.put("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    ctx: RequestContext = Depends(get_admin_context),
):
    order = ctx.session.get(Order, order_id)
    if not order:
        raise OrderNotFound()

    try:
        admin_transition(ctx.session, order, payload.status, admin_id=ctx.user.id)
        ctx.session.commit()
    except Exception:
        ctx.session.rollback()
        raise

    ctx.session.refresh(order)
    return OrderRead.model_validate(order)
