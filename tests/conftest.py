# tests/conftest.py
import os
from decimal import Decimal

# In-memory database for the whole test run; must be set before the app modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models.product  # noqa: F401
import models.order  # noqa: F401
import models.log  # noqa: F401
from main import app
from models.product import Product
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from services.order import OrderService
from services.product import ProductService


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema per test; StaticPool keeps the single in-memory connection alive."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def product_repo(db_session):
    return ProductRepository(db_session)


@pytest.fixture
def order_repo(db_session):
    return OrderRepository(db_session)


@pytest.fixture
def product_service(product_repo):
    return ProductService(product_repo)


@pytest.fixture
def order_service(order_repo, product_repo):
    return OrderService(order_repo, product_repo)


@pytest.fixture
def make_product(product_repo):
    """Stores a product straight through the repository."""
    def _make(sku="ABC-123", price="100.00", stock=10, **kwargs):
        kwargs.setdefault("name", f"Product {sku}")
        kwargs.setdefault("category", "Tools")
        return product_repo.add(Product(sku=sku, price=Decimal(price), stock_quantity=stock, **kwargs))
    return _make


@pytest.fixture
def client(db_session):
    """API client sharing the test session with the request handlers."""
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    # No context manager: the lifespan would create tables on the module engine
    test_client = TestClient(app)
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()
