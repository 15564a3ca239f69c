"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from datetime import datetime

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from realty_analytics.main import app
from realty_analytics.auth.jwt import create_access_token
from realty_analytics.db.database import get_db
# Import all models to ensure all tables are created
from realty_analytics.db.models import (
    Base, Property, Lease, RentPayment, Expense, PropertyValuation, PriceHistory,
    InvestmentPortfolio, PortfolioProperty, DownPaymentProgram, TaxReport,
    CashFlowProjection,
)

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Bearer headers for the primary test user."""
    token = create_access_token({"sub": USER_ID})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers():
    """Bearer headers for a second user."""
    token = create_access_token({"sub": OTHER_USER_ID})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_property(db_session):
    """Factory for catalog properties."""

    def _make(**overrides):
        fields = dict(
            title="Test Property",
            address="123 Test St",
            city="Austin",
            state="TX",
            country="US",
            base_price=250000,
            square_meters=125,
            bedrooms=3,
            bathrooms=2,
            year_built=2005,
            published_at=datetime(2025, 3, 1, 9, 0),
        )
        fields.update(overrides)
        prop = Property(**fields)
        db_session.add(prop)
        db_session.commit()
        db_session.refresh(prop)
        return prop

    return _make


@pytest.fixture
def test_property(make_property):
    """A single catalog property."""
    return make_property()
