from typing import List, Optional

from fastapi import APIRouter, Depends, status

from app.dependencies.context import RequestContext, get_request_context
from app.schemas.orders_schemas import (
    OrderCreate,
    OrderDetailRead,
    OrderRead,
    PlacedOrderRead,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from app.services.order_service import (
    PlacedOrder,
    cancel_user_order,
    create_order,
    get_user_order,
    list_user_orders,
    start_gateway_payment,
)
from app.services.payment_gateway import PaymentGateway, get_payment_gateway
from app.services.payment_service import verify_payment

router = APIRouter()


def _placed_order_response(placed: PlacedOrder) -> PlacedOrderRead:
    return PlacedOrderRead(
        **OrderRead.model_validate(placed.order).model_dump(),
        razorpay_order_id=placed.gateway_order_id,
        razorpay_key_id=placed.gateway_key_id,
    )


@router.post("", response_model=PlacedOrderRead, status_code=status.HTTP_201_CREATED)
def place_order(
    payload: OrderCreate,
    ctx: RequestContext = Depends(get_request_context),
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
):
    placed = create_order(
        ctx.session,
        ctx.user,
        address=payload.address.model_dump(by_alias=True),
        payment_mode=payload.payment_mode,
        gateway=gateway,
        client_total=payload.total_amount,
    )
    return _placed_order_response(placed)


@router.get("", response_model=List[OrderRead])
def my_orders(ctx: RequestContext = Depends(get_request_context)):
    return [OrderRead.model_validate(o) for o in list_user_orders(ctx.session, ctx.user.id)]


@router.get("/{order_id}", response_model=OrderDetailRead)
def order_detail(order_id: int, ctx: RequestContext = Depends(get_request_context)):
    order = get_user_order(ctx.session, order_id, ctx.user.id)
    return OrderDetailRead.model_validate(order)


@router.post("/{order_id}/verify-payment", response_model=VerifyPaymentResponse)
def verify_order_payment(
    order_id: int,
    payload: VerifyPaymentRequest,
    ctx: RequestContext = Depends(get_request_context),
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
):
    result = verify_payment(
        session=ctx.session,
        order_id=order_id,
        user=ctx.user,
        razorpay_payment_id=payload.razorpay_payment_id,
        razorpay_signature=payload.razorpay_signature,
        gateway=gateway,
    )

    return VerifyPaymentResponse(
        order_id=result.order.id,
        order_status=result.order.status,
        txn_id=result.payment.txn_id if result.payment else None,
        already_processed=result.already_processed,
    )


# Retry the gateway step for an order left pending without a reference
@router.post("/{order_id}/payment-intent", response_model=PlacedOrderRead)
def retry_payment_intent(
    order_id: int,
    ctx: RequestContext = Depends(get_request_context),
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
):
    order = get_user_order(ctx.session, order_id, ctx.user.id)
    return _placed_order_response(start_gateway_payment(ctx.session, order, gateway))


@router.post("/{order_id}/cancel", response_model=OrderRead)
def cancel_order(order_id: int, ctx: RequestContext = Depends(get_request_context)):
    order = cancel_user_order(ctx.session, order_id, ctx.user)
    return OrderRead.model_validate(order)
