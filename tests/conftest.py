"""
Shared fixtures: in-memory database, API client with overridden
dependencies, users, products and a fake Razorpay gateway.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("RAZORPAY_KEY_ID", "")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import create_db_and_tables, get_session
from app.main import app
from app.models.cart import CartItem
from app.models.product import Product
from app.models.user import User
from app.services.payment_gateway import get_payment_gateway
from app.utils.hash import hash_password
from app.utils.token import token_for_user
from tests.helpers import FakeGateway


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


# ============================================================================
# API client
# ============================================================================

@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(engine, gateway):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def no_gateway_client(client):
    app.dependency_overrides[get_payment_gateway] = lambda: None
    return client


# ============================================================================
# Data
# ============================================================================

def make_user(session: Session, username: str, role: str = "user") -> User:
    user = User(username=username, password=hash_password("secret123"), role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for_user(user)}"}


@pytest.fixture
def customer(session):
    return make_user(session, "priya")


@pytest.fixture
def other_customer(session):
    return make_user(session, "rahul")


@pytest.fixture
def admin(session):
    return make_user(session, "admin", role="admin")


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def other_headers(other_customer):
    return auth_headers(other_customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def products(session):
    earrings = Product(
        name="Silver Jhumka Earrings",
        slug="silver-jhumka-earrings",
        description="Oxidised silver jhumkas.",
        price=Decimal("500.00"),
        category="Earrings",
        images=[],
        stock=10,
    )
    bangles = Product(
        name="Gold Plated Bangle",
        slug="gold-plated-bangle",
        description="Single gold plated bangle.",
        price=Decimal("1000.00"),
        category="Bangles",
        images=[],
        stock=10,
    )
    session.add(earrings)
    session.add(bangles)
    session.commit()
    session.refresh(earrings)
    session.refresh(bangles)
    return earrings, bangles


@pytest.fixture
def filled_cart(session, customer, products):
    """2 x 500 + 1 x 1000 in the customer's cart."""
    earrings, bangles = products
    session.add(CartItem(user_id=customer.id, product_id=earrings.id, quantity=2))
    session.add(CartItem(user_id=customer.id, product_id=bangles.id, quantity=1))
    session.commit()
    return products


ADDRESS = {
    "fullName": "Priya Sharma",
    "phone": "9876543210",
    "street": "12 MG Road, Indiranagar",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560038",
}


@pytest.fixture
def address():
    return dict(ADDRESS)
