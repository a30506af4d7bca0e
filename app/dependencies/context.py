from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from app.database import get_session
from app.models.user import User
from app.utils.token import get_current_user


@dataclass
class RequestContext:
    """Authenticated user plus the database session for one request."""

    user: User
    session: Session


def get_request_context(
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> RequestContext:
    return RequestContext(user=current_user, session=session)


def require_admin(current_user: User = Depends(get_current_user)):
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def get_admin_context(
    admin: User = Depends(require_admin),
    session: Session = Depends(get_session),
) -> RequestContext:
    return RequestContext(user=admin, session=session)
