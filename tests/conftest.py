# tests/conftest.py

"""
Shared fixtures.

The app reads its settings at import time, so the database URL and JWT
secret are put in the environment before anything from stockroom is
imported. Every test gets freshly created tables in a throwaway SQLite
file; SQLite is file-backed (not :memory:) so concurrent sessions on
worker threads see the same database.
"""

import logging
import os
import tempfile
import threading
import uuid

import pytest

_TMP_DIR = tempfile.mkdtemp(prefix="stockroom-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'stockroom.db')}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ORDER_TX_MAX_ATTEMPTS"] = "10"
os.environ["ORDER_TX_RETRY_BACKOFF"] = "0.01"

from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from stockroom.core.auth import require_admin, require_auth  # noqa: E402
from stockroom.database import engine  # noqa: E402
from stockroom.main import app  # noqa: E402
from stockroom.models.category import Category  # noqa: E402
from stockroom.models.customer import Customer  # noqa: E402
from stockroom.models.product import Product  # noqa: E402
from stockroom.models.stock import Stock  # noqa: E402
from stockroom.models.user import User  # noqa: E402
from stockroom.repositories.customer_repo import CustomerRepository  # noqa: E402
from stockroom.repositories.order_repo import OrderRepository  # noqa: E402
from stockroom.repositories.product_repo import ProductRepository  # noqa: E402
from stockroom.repositories.stock_repo import StockRepository  # noqa: E402
from stockroom.repositories.user_repo import UserRepository  # noqa: E402
from stockroom.routers import orders as orders_router  # noqa: E402
from stockroom.routers import stocks as stocks_router  # noqa: E402
from stockroom.services.order_service import OrderService  # noqa: E402
from stockroom.services.stock_service import StockService  # noqa: E402

# Suppress noisy logs from SQLAlchemy during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class RecordingNotifier:
    """Notifier that remembers every alert instead of sending email."""

    def __init__(self):
        self.calls: list[dict] = []
        self._lock = threading.Lock()

    def notify_low_stock(self, product_name, batch_number, quantity, recipient_emails):
        with self._lock:
            self.calls.append(
                {
                    "product_name": product_name,
                    "batch_number": batch_number,
                    "quantity": quantity,
                    "recipients": list(recipient_emails),
                }
            )


# --- Database ---


@pytest.fixture(autouse=True)
def fresh_database():
    """Drop and recreate every table so each test starts empty."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


@pytest.fixture()
def session():
    with Session(engine) as db:
        yield db


# --- Services wired to a recording notifier ---


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def stock_service(notifier):
    return StockService(
        StockRepository(),
        ProductRepository(),
        UserRepository(),
        notifier,
    )


@pytest.fixture()
def order_service(stock_service):
    return OrderService(
        OrderRepository(),
        CustomerRepository(),
        StockRepository(),
        ProductRepository(),
        stock_service,
    )


# --- Data builders ---


@pytest.fixture()
def make_category(session):
    def _make(name="Footwear"):
        category = Category(name=name, description="")
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    return _make


@pytest.fixture()
def make_product(session, make_category):
    def _make(name="Trail Runner", code="FOO001", price=None, category=None):
        category = category or make_category()
        product = Product(
            name=name,
            product_code=code,
            description="",
            category_id=category.id,
            price=price,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture()
def make_stock(session):
    def _make(product, quantity=10, low_stock_alert=5, batch="BATCH_FOO001_010125"):
        stock = Stock(
            product_id=product.id,
            batch_number=batch,
            quantity=quantity,
            size="M",
            price=20.0,
            supplier="Acme Supply",
            low_stock_alert=low_stock_alert,
        )
        session.add(stock)
        session.commit()
        session.refresh(stock)
        return stock

    return _make


@pytest.fixture()
def make_customer(session):
    def _make(email="jane@acme.io"):
        customer = Customer(
            first_name="Jane",
            last_name="Doe",
            email=email,
            phone="555-0100",
            address="1 Main St",
            city="Springfield",
            state="IL",
        )
        session.add(customer)
        session.commit()
        session.refresh(customer)
        return customer

    return _make


@pytest.fixture()
def make_user(session):
    def _make(email="staff@acme.io", role="user"):
        user = User(id=uuid.uuid4(), email=email, name=email.split("@")[0], role=role)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


# --- HTTP client ---


@pytest.fixture()
def admin_user():
    return User(id=uuid.uuid4(), email="admin@acme.io", name="admin", role="admin")


@pytest.fixture()
def client(admin_user, notifier, monkeypatch):
    """
    TestClient authenticated as an admin. Low-stock alerts raised through
    the API land in `notifier`.
    """
    monkeypatch.setattr(stocks_router.service, "notifier", notifier)
    monkeypatch.setattr(orders_router.stock_service, "notifier", notifier)

    app.dependency_overrides[require_auth] = lambda: admin_user
    app.dependency_overrides[require_admin] = lambda: admin_user
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(require_auth, None)
        app.dependency_overrides.pop(require_admin, None)
