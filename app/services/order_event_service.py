from typing import List, Optional

from sqlmodel import Session, select

from app.models.order_event import OrderEvent

EVENT_LABELS = {
    "order_placed": "Order placed",
    "gateway_order_created": "Payment initiated",
    "payment_success": "Payment received",
    "status_cod_confirmed": "Cash on delivery confirmed",
    "status_paid": "Marked as paid",
    "status_shipped": "Order shipped",
    "status_delivered": "Order delivered",
    "status_cancelled": "Order cancelled",
}


def log_order_event(
    session: Session,
    order_id: int,
    event_type: str,
    label: Optional[str] = None,
    created_by: str = "system",
    status: Optional[str] = None,
    meta: Optional[dict] = None,
) -> OrderEvent:
    """
    Add a timeline entry to the current transaction.

    Nothing is committed here; the event lands together with the change it
    describes or not at all.
    """
    event = OrderEvent(
        order_id=order_id,
        event_type=event_type,
        label=label or EVENT_LABELS.get(event_type, event_type.replace("_", " ").capitalize()),
        status=status,
        created_by=created_by,
        meta=meta,
    )
    session.add(event)
    return event


def list_order_events(session: Session, order_id: int) -> List[OrderEvent]:
    return session.exec(
        select(OrderEvent)
        .where(OrderEvent.order_id == order_id)
        .order_by(OrderEvent.created_at, OrderEvent.id)
    ).all()
