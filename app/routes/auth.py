from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from app.database import get_session
from app.models.user import User
from app.schemas.user_schemas import UserRegister, UserLogin, UserRead, Token
from app.utils.hash import hash_password, needs_rehash, verify_password
from app.utils.token import get_current_user, token_for_user


router = APIRouter()


# -------- AUTH ROUTES --------

@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    existing_user = session.exec(select(User).where(User.username == payload.username)).first()
    if existing_user:
        raise HTTPException(400, "User exists")

    user = User(
        username=payload.username,
        password=hash_password(payload.password),
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    token = token_for_user(user)
    return Token(access_token=token, token_type="bearer", user=UserRead.model_validate(user))


@router.post("/login", response_model=Token)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.username == payload.username)).first()

    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(401, "Invalid username or password")

    if not user.can_login:
        raise HTTPException(403, "User account is disabled")

    if needs_rehash(user.password):
        user.password = hash_password(payload.password)
        session.add(user)
        session.commit()

    token = token_for_user(user)
    return Token(access_token=token, token_type="bearer")


@router.get("/user", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return current_user
