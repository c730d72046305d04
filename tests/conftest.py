"""
Pytest configuration and shared fixtures.

The app is exercised against an in-memory SQLite database and a fake
email client that records what would have been sent.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import smtplib
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.core.config import Settings, get_settings
from app.core.email_client import get_email_client
from app.database import get_session
from app.main import app
from app.models.referral import Referral
from app.repositories.order_repo import OrderRepository
from app.repositories.referral_repo import ReferralRepository
from app.services.order_service import OrderService
from app.services.referral_service import ReferralService

FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeEmailClient:
    """Stands in for EmailClient; set fail=True to simulate SMTP errors."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def send_email(self, to_email, subject, text_body, html_body=None):
        if self.fail:
            raise smtplib.SMTPException("connection refused")
        self.sent.append(
            {
                "to": to_email,
                "subject": subject,
                "text": text_body,
                "html": html_body,
            }
        )


class SequentialCodes:
    """Deterministic discount code generator: DISCOUNT00000001, ..."""

    def __init__(self, prefix: str = "DISCOUNT"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count:08d}"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        OWNER_EMAIL="owner@shop.test",
        OWNER_DASHBOARD_URL="http://localhost:3000/owner-dashboard",
    )


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def email_client():
    return FakeEmailClient()


@pytest.fixture
def codes():
    return SequentialCodes()


@pytest.fixture
def order_service(settings, codes):
    return OrderService(
        OrderRepository(),
        ReferralRepository(),
        settings,
        now=lambda: FIXED_NOW,
        code_generator=codes,
    )


@pytest.fixture
def referral_service(settings, codes):
    return ReferralService(
        ReferralRepository(),
        settings,
        now=lambda: FIXED_NOW,
        code_generator=codes,
    )


@pytest.fixture
def make_referral(session):
    """Insert a referral row directly."""

    def _make(code="REF123", status="Pending", claimed=False, discount_code=None):
        referral = Referral(
            referrer_id="mockUser123",
            referral_code=code,
            referred_email="friend@example.com",
            status=status,
            claimed=claimed,
            discount_code=discount_code,
        )
        session.add(referral)
        session.commit()
        session.refresh(referral)
        return referral

    return _make


@pytest.fixture
def client(engine, settings, email_client):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_email_client] = lambda: email_client
    app.dependency_overrides[get_settings] = lambda: settings

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def order_payload():
    return {
        "cartItems": [
            {
                "id": "1",
                "name": "Whole Chicken",
                "price": 300,
                "quantity": 2,
                "image": "x.jpg",
                "category": "chicken",
            }
        ],
        "deliveryAddress": "12 Main St",
        "mobileNumber": "9876543210",
        "paymentMethod": "cod",
        "totalPrice": 600,
    }
