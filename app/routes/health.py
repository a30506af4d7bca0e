import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from app.config import settings
from app.database import get_session
from app.services.payment_gateway import PaymentGateway, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter()


def _ping_database(session: Session) -> str:
    try:
        session.exec(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return "failed"
    return "ok"


@router.get("")
def health_check(
    session: Session = Depends(get_session),
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
):
    """Liveness plus the state of the database and the payment gateway config."""
    return {
        "status": "ok",
        "env": settings.ENV,
        "database": _ping_database(session),
        "paymentGateway": "configured" if gateway is not None else "disabled",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
