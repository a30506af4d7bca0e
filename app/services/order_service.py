import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus, PaymentMode
from app.exceptions import GatewayUnavailable, IllegalTransition, OrderConflict, OrderNotFound
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.user import User
from app.services.cart_service import CartRepository, read_cart_snapshot
from app.services.order_event_service import log_order_event
from app.services.order_status import transition_order
from app.services.order_totals import calculate_total, to_decimal, to_minor_units
from app.services.payment_gateway import PaymentGateway, PaymentGatewayError

logger = logging.getLogger(__name__)


@dataclass
class PlacedOrder:
    order: Order
    gateway_order_id: Optional[str] = None
    gateway_key_id: Optional[str] = None


def get_user_order(session: Session, order_id: int, user_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order or order.user_id != user_id:
        raise OrderNotFound()
    return order


def list_user_orders(session: Session, user_id: int) -> List[Order]:
    return session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()


def create_order(
    session: Session,
    user: User,
    address: dict,
    payment_mode: PaymentMode,
    gateway: Optional[PaymentGateway],
    client_total: Optional[Decimal] = None,
) -> PlacedOrder:
    """
    Turn the user's cart into an order.

    Order row, line items, cart clearing and (for COD) the confirmation are
    committed together. The gateway call happens afterwards; if it fails the
    order stays pending without a payment reference and GatewayUnavailable is
    raised with the order id so the client can retry or cancel.
    """
    payment_mode = PaymentMode(payment_mode)

    if payment_mode == PaymentMode.gateway and gateway is None:
        raise GatewayUnavailable("Razorpay payment is not configured")

    lines = read_cart_snapshot(session, user.id)
    total = calculate_total((product.price, item.quantity) for item, product in lines)

    if client_total is not None and to_decimal(client_total) != total:
        logger.info(
            f"Ignoring client total {client_total} for user {user.id}; server total is {total}"
        )

    try:
        order = Order(
            user_id=user.id,
            total_amount=total,
            status=OrderStatus.pending.value,
            payment_mode=payment_mode.value,
            address=address,
        )
        session.add(order)
        session.flush()

        for item, product in lines:
            session.add(
                OrderItem(
                    order_id=order.id,
                    product_id=product.id,
                    quantity=item.quantity,
                    price=product.price,
                )
            )

        CartRepository(session).clear(user.id)

        log_order_event(
            session,
            order_id=order.id,
            event_type="order_placed",
            created_by=f"user:{user.id}",
            status=OrderStatus.pending.value,
            meta={"total": str(total), "payment_mode": payment_mode.value},
        )

        if payment_mode == PaymentMode.cod:
            transition_order(session, order, OrderStatus.cod_confirmed, actor=f"user:{user.id}")

        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    logger.info(
        f"Order {order.id} created for user {user.id}: total={total}, mode={payment_mode.value}"
    )

    if payment_mode == PaymentMode.cod:
        return PlacedOrder(order=order)

    return start_gateway_payment(session, order, gateway)


def _lock_order(session: Session, order_id: int) -> Order:
    # bypasses the identity map; row lock where the backend supports one
    return session.exec(
        select(Order)
        .where(Order.id == order_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).one()


def start_gateway_payment(
    session: Session,
    order: Order,
    gateway: Optional[PaymentGateway],
) -> PlacedOrder:
    """
    Create (or re-create after a failure) the gateway order for a pending order.

    The reference is stored with an UPDATE guarded on `pending` and an empty
    `payment_id`. When another request linked a reference first, that one is
    returned and the new remote order is left unused, so every client of the
    order pays against the same reference.
    """
    reference = None
    try:
        order = _lock_order(session, order.id)

        if order.payment_mode != PaymentMode.gateway.value:
            raise IllegalTransition(order.status, OrderStatus.paid.value)
        if order.status != OrderStatus.pending.value:
            raise IllegalTransition(order.status, OrderStatus.paid.value)

        if gateway is None:
            raise GatewayUnavailable("Razorpay payment is not configured", order_id=order.id)

        if order.payment_id:
            existing = order.payment_id
            session.rollback()
            return PlacedOrder(order=order, gateway_order_id=existing, gateway_key_id=gateway.key_id)

        try:
            reference = gateway.create_intent(
                to_minor_units(order.total_amount),
                receipt=f"order_rcptid_{order.id}",
            )
        except PaymentGatewayError:
            logger.warning(f"Order {order.id} left pending without a gateway reference")
            raise GatewayUnavailable("Error creating Razorpay order", order_id=order.id)

        result = session.execute(
            update(Order)
            .where(
                Order.id == order.id,
                Order.status == OrderStatus.pending.value,
                Order.payment_id.is_(None),
            )
            .values(payment_id=reference)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise OrderConflict()

        log_order_event(
            session,
            order_id=order.id,
            event_type="gateway_order_created",
            status=OrderStatus.pending.value,
            meta={"gateway_order_id": reference},
        )
        session.commit()
    except OrderConflict:
        session.rollback()
        session.refresh(order)
        if order.status == OrderStatus.pending.value and order.payment_id:
            logger.warning(
                f"Gateway order {reference} unused; order {order.id} is already linked to {order.payment_id}"
            )
            return PlacedOrder(order=order, gateway_order_id=order.payment_id, gateway_key_id=gateway.key_id)
        raise IllegalTransition(order.status, OrderStatus.paid.value)
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    logger.info(f"Order {order.id} linked to gateway order {reference}")
    return PlacedOrder(order=order, gateway_order_id=reference, gateway_key_id=gateway.key_id)


def cancel_user_order(session: Session, order_id: int, user: User) -> Order:
    order = get_user_order(session, order_id, user.id)

    # customers can only withdraw orders nobody has acted on yet
    if order.status != OrderStatus.pending.value:
        raise IllegalTransition(order.status, OrderStatus.cancelled.value)

    try:
        transition_order(session, order, OrderStatus.cancelled, actor=f"user:{user.id}")
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    return order
