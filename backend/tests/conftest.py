import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

import sherpamomo.models  # noqa: E402,F401
from sherpamomo.api import auth as auth_api  # noqa: E402
from sherpamomo.api.deps import get_db, issue_session_token  # noqa: E402
from sherpamomo.main import app  # noqa: E402
from sherpamomo.models.product import Product, ProductCategory, ProductUnit  # noqa: E402
from sherpamomo.models.user import User, UserRole, AuthProvider  # noqa: E402


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    app.dependency_overrides[get_db] = lambda: session
    for limiter in (auth_api.code_request_limiter, auth_api.verify_limiter, auth_api.mobile_code_limiter):
        limiter.reset()

    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    counter = {"n": 0}

    def make_user(role: UserRole = UserRole.CUSTOMER, email: Optional[str] = None,
                  phone: Optional[str] = None) -> User:
        counter["n"] += 1
        user = User(
            phone=phone or f"+1416555{counter['n']:04d}",
            email=email,
            name=f"User {counter['n']}",
            role=role,
            auth_provider=AuthProvider.PHONE,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return make_user


@pytest.fixture(name="admin")
def admin_fixture(make_user) -> User:
    return make_user(role=UserRole.ADMIN)


@pytest.fixture(name="customer")
def customer_fixture(make_user) -> User:
    return make_user(email="momo.fan@gmail.com")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_session_token(user)}"}


@pytest.fixture(name="product")
def product_fixture(session: Session) -> Product:
    product = Product(
        name="Chicken Momo",
        description="Juicy chicken momos steamed to perfection.",
        price=Decimal("12.99"),
        category=ProductCategory.CHICKEN,
        image="https://images.example.com/chicken-momo.jpg",
        rating=4.8,
        review_count=124,
        ingredients=["Minced Chicken", "Onion", "Ginger"],
        amount=10,
        unit=ProductUnit.PCS,
        stock=25,
        featured=True,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def order_payload(*items, customer: Optional[dict] = None) -> dict:
    payload = {
        "items": [
            {
                "productId": product_id,
                "name": name,
                "price": price,
                "quantity": quantity,
                "unit": "pcs",
            }
            for product_id, name, price, quantity in items
        ],
        "paymentInfo": {"method": "cash_on_delivery"},
    }
    if customer is not None:
        payload["customerInfo"] = customer
    return payload
