import logging
from typing import Optional, Union

from sqlalchemy import update
from sqlmodel import Session

from app.constants.order_status import (
    ALLOWED_TRANSITIONS,
    GATEWAY_ONLY_STATUSES,
    OrderStatus,
    PaymentMode,
)
from app.exceptions import IllegalTransition, OrderConflict
from app.models.order import Order
from app.services.order_event_service import log_order_event

logger = logging.getLogger(__name__)


def _as_status(value: Union[OrderStatus, str]) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise IllegalTransition(str(value), str(value))


def can_transition(current: Union[OrderStatus, str], requested: Union[OrderStatus, str]) -> bool:
    try:
        current, requested = OrderStatus(current), OrderStatus(requested)
    except ValueError:
        return False
    return requested in ALLOWED_TRANSITIONS[current]


def ensure_transition(
    current: Union[OrderStatus, str],
    requested: Union[OrderStatus, str],
    payment_mode: Optional[str] = None,
) -> None:
    if not can_transition(current, requested):
        raise IllegalTransition(str(getattr(current, "value", current)),
                                str(getattr(requested, "value", requested)))

    requested = OrderStatus(requested)
    # a payment confirmation has to match how the order is being paid
    if payment_mode == PaymentMode.cod.value and requested == OrderStatus.paid:
        raise IllegalTransition(OrderStatus(current).value, requested.value)
    if payment_mode == PaymentMode.gateway.value and requested == OrderStatus.cod_confirmed:
        raise IllegalTransition(OrderStatus(current).value, requested.value)


def transition_order(
    session: Session,
    order: Order,
    requested: Union[OrderStatus, str],
    *,
    actor: str = "system",
    meta: Optional[dict] = None,
) -> Order:
    """
    Move `order` to `requested` if the table allows it.

    The UPDATE is conditional on the status this session last read, so a
    concurrent writer makes this call fail with OrderConflict instead of
    silently overwriting. Does not commit.
    """
    current = _as_status(order.status)
    requested = _as_status(requested)
    ensure_transition(current, requested, order.payment_mode)

    result = session.execute(
        update(Order)
        .where(Order.id == order.id, Order.status == current.value)
        .values(status=requested.value)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        logger.warning(
            f"Order {order.id} status changed concurrently; "
            f"expected {current.value} before moving to {requested.value}"
        )
        raise OrderConflict()

    order.status = requested.value
    session.add(order)

    log_order_event(
        session,
        order_id=order.id,
        event_type=f"status_{requested.value}",
        created_by=actor,
        status=requested.value,
        meta={"from": current.value, "to": requested.value, **(meta or {})},
    )

    logger.info(f"Order {order.id}: {current.value} -> {requested.value} by {actor}")
    return order


def admin_transition(session: Session, order: Order, requested: Union[OrderStatus, str], admin_id: int) -> Order:
    requested = _as_status(requested)
    if requested in GATEWAY_ONLY_STATUSES:
        raise IllegalTransition(order.status, requested.value)

    return transition_order(session, order, requested, actor=f"admin:{admin_id}")
