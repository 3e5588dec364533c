from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from ayana.app import create_app
from ayana.config import TestConfig
from ayana.extensions import db
from ayana.models import Customer, Discount, DiscountType, Product
from ayana.repositories import InMemoryStore, SqlAlchemyStore
from ayana.services.discounts import DiscountCodeVerifier

NOW = datetime(2026, 10, 19, 12, 0, 0)


def _products():
    return [
        Product(id=1, name="Red roses", price=Decimal("20.00"), flower_type="rose",
                stock=10, category="bouquets", description="Twelve red roses", product_type="bouquet"),
        Product(id=2, name="White tulips", price=Decimal("30.00"), flower_type="tulip",
                stock=5, category="bouquets", description="Ten white tulips", product_type="bouquet"),
    ]


def _discounts(now):
    return [
        Discount(id=1, code="PERCENT10", discount_type=DiscountType.PERCENTAGE.value,
                 amount=Decimal("10"), begins_at=now - timedelta(days=1), ends_at=now + timedelta(days=1)),
        Discount(id=2, code="TENOFF", discount_type=DiscountType.AMOUNT_OFF.value,
                 amount=Decimal("10"), begins_at=now - timedelta(days=1), ends_at=now + timedelta(days=1)),
        Discount(id=3, code="EXPIRED", discount_type=DiscountType.AMOUNT_OFF.value,
                 amount=Decimal("10"), begins_at=now - timedelta(days=10), ends_at=now - timedelta(days=1)),
        Discount(id=4, code="LATER", discount_type=DiscountType.PERCENTAGE.value,
                 amount=Decimal("50"), begins_at=now + timedelta(days=1), ends_at=None),
    ]


# ---------------------------------------------------------------------------
# In-memory store (service tests)
# ---------------------------------------------------------------------------
@pytest.fixture()
def store():
    store = InMemoryStore()
    for p in _products():
        store.products.add(p)
    for d in _discounts(NOW):
        store.discounts.add(d)
    store.commit()
    return store


@pytest.fixture()
def verifier(store):
    return DiscountCodeVerifier(store.discounts, clock=lambda: NOW)


# ---------------------------------------------------------------------------
# Flask app + SQLite (handler tests)
# ---------------------------------------------------------------------------
@pytest.fixture()
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()

        now = datetime.utcnow()
        db.session.add_all(_products())
        db.session.add_all(_discounts(now))
        for username in ("alice", "bob"):
            c = Customer(username=username, email=f"{username}@example.com", full_name=username.title())
            c.set_password("secret")
            db.session.add(c)
        db.session.commit()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture()
def sql_store(app):
    return SqlAlchemyStore(db.session)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login_as(client):
    def _login(username="alice", password="secret"):
        response = client.post("/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200
        return response.get_json()["customerId"]

    return _login


@pytest.fixture()
def alice(login_as):
    return login_as("alice")


@pytest.fixture()
def now():
    return NOW
