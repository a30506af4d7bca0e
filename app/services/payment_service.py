import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus
from app.exceptions import (
    GatewayUnavailable,
    IllegalTransition,
    InvalidSignature,
    OrderConflict,
    OrderNotFound,
)
from app.models.order import Order
from app.models.payment import Payment
from app.models.user import User
from app.services.order_event_service import log_order_event
from app.services.order_status import transition_order
from app.services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    order: Order
    payment: Optional[Payment]
    already_processed: bool = False


def _already_paid(session: Session, order: Order) -> VerificationResult:
    existing_payment = session.exec(
        select(Payment).where(Payment.order_id == order.id)
    ).first()
    logger.info(f"Order {order.id} already paid; verification is a no-op")
    return VerificationResult(order=order, payment=existing_payment, already_processed=True)


def verify_payment(
    *,
    session: Session,
    order_id: int,
    user: User,
    razorpay_payment_id: str,
    razorpay_signature: str,
    gateway: Optional[PaymentGateway],
) -> VerificationResult:
    """
    Single gate that moves an order from pending to paid.

    The gateway signature is checked before anything else is touched. The
    status change is a conditional update, so of two concurrent calls with
    the same valid signature only one records a payment; the other reports
    the order as already processed.
    """
    if gateway is None:
        raise GatewayUnavailable("Razorpay not configured")

    order = session.get(Order, order_id)
    if not order or order.user_id != user.id or not order.payment_id:
        raise OrderNotFound()

    if not gateway.verify_signature(order.payment_id, razorpay_payment_id, razorpay_signature):
        logger.warning(f"Invalid payment signature for order {order.id}")
        raise InvalidSignature()

    if order.status == OrderStatus.paid.value:
        return _already_paid(session, order)

    try:
        transition_order(
            session,
            order,
            OrderStatus.paid,
            actor=f"user:{user.id}",
            meta={"txn_id": razorpay_payment_id},
        )

        payment = Payment(
            order_id=order.id,
            user_id=user.id,
            txn_id=razorpay_payment_id,
            gateway_order_id=order.payment_id,
            gateway_signature=razorpay_signature,
            amount=order.total_amount,
            status="success",
            method="razorpay",
        )
        session.add(payment)

        log_order_event(
            session,
            order_id=order.id,
            event_type="payment_success",
            created_by="gateway",
            status=OrderStatus.paid.value,
            meta={"txn_id": razorpay_payment_id},
        )

        session.commit()
    except (OrderConflict, IntegrityError):
        # lost the race against another verification of the same order
        session.rollback()
        session.refresh(order)
        if order.status == OrderStatus.paid.value:
            return _already_paid(session, order)
        raise IllegalTransition(order.status, OrderStatus.paid.value)
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    session.refresh(payment)
    logger.info(f"Order {order.id} paid, txn {razorpay_payment_id}")

    return VerificationResult(order=order, payment=payment)
