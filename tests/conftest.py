import os

# Settings are read at import time by app.database / app.core.auth
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import get_settings
from app.database import get_session
from app.main import app
from app.models.customer import Customer
from app.models.product import Category, Product
from app.services.notification_service import FulfillmentNotifier, get_notifier


class RecordingMailer:
    """Stands in for email_client.send_email."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def __call__(self, to_email, subject, text_body, html_body=None):
        if self.fail:
            raise RuntimeError("SMTP down")
        self.sent.append((to_email, subject))


class FakeZalo:
    is_configured = True

    def __init__(self):
        self.messages: list[str] = []
        self.attempts = 0
        self.fail = False

    def push_text(self, text, user_id=None):
        self.attempts += 1
        if self.fail:
            raise RuntimeError("Zalo OA unreachable")
        self.messages.append(text)
        return {"error": 0}


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="mailer")
def mailer_fixture():
    return RecordingMailer()


@pytest.fixture(name="zalo")
def zalo_fixture():
    return FakeZalo()


@pytest.fixture(name="notifier")
def notifier_fixture(mailer, zalo):
    settings = get_settings().model_copy(update={"ADMIN_EMAIL": "admin@shop.test"})
    return FulfillmentNotifier(settings=settings, send_email=mailer, zalo=zalo)


@pytest.fixture(name="client")
def client_fixture(engine, notifier):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(name="products")
def products_fixture(engine):
    """Two products: rose box (stock 10) and fruit basket (stock 3)."""
    with Session(engine) as session:
        category = Category(name="Flowers")
        session.add(category)
        session.commit()
        session.refresh(category)

        rose = Product(name="Red rose box", price=50000, stock=10, category_id=category.category_id)
        basket = Product(name="Fruit basket", price=30000, stock=3, category_id=category.category_id)
        session.add(rose)
        session.add(basket)
        session.commit()
        return {"rose": rose.product_id, "basket": basket.product_id}


@pytest.fixture(name="registered_customer")
def registered_customer_fixture(engine):
    """Customer profile paired with account user_id=7."""
    with Session(engine) as session:
        customer = Customer(
            user_id=7,
            name="Nguyen Thi Lan",
            email="lan@example.com",
            phone="0901234567",
            address="12 Le Loi, District 1, HCMC",
        )
        session.add(customer)
        session.commit()
        return customer.customer_id


def make_token(user_id: int, role: str = "user", username: str = "someone") -> str:
    settings = get_settings()
    return jwt.encode(
        {"user_id": user_id, "role": role, "username": username},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )


def auth_header(user_id: int, role: str = "user") -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture(name="admin_headers")
def admin_headers_fixture():
    return auth_header(1, role="admin")
