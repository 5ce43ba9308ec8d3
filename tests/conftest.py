"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import get_db
from app.calculations.models import FeeMode, MicroRegime, SimulationInput
# Import all models to ensure all tables are created
from app.db.models import Base, Simulation, SimulationInputRecord, SimulationResultRecord


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks integration tests")


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
def base_inputs():
    """10,000.00 purchase, 8% notary, 4% over 20 years, 100.00/month rent, micro, 30% TMI."""
    return SimulationInput(
        price_cents=1_000_000,
        notary_fee_mode=FeeMode.percent,
        notary_fee_percent_bps=800,
        notary_fee_cents=None,
        works_cents=0,
        furniture_cents=0,
        down_payment_cents=0,
        loan_rate_bps=400,
        loan_years=20,
        insurance_mode=FeeMode.percent,
        insurance_rate_bps=30,
        insurance_monthly_cents=None,
        rent_monthly_cents=10_000,
        vacancy_rate_bps=0,
        recoverable_charges_monthly_cents=0,
        non_recoverable_charges_monthly_cents=0,
        property_tax_cents=0,
        pno_cents=0,
        management_fee_bps=0,
        tmi_bps=3000,
        regime=MicroRegime(),
    )


@pytest.fixture
def form_data():
    """A valid raw simulation form, as the API receives it."""
    return {
        "name": "Studio Lyon",
        "price": "150 000",
        "notary_fee_mode": "percent",
        "notary_fee_percent": "7,5",
        "works": "10000",
        "furniture": "5000",
        "down_payment": "20000",
        "loan_rate": "3,8",
        "loan_years": "20",
        "insurance_mode": "percent",
        "insurance_rate": "0,3",
        "rent_monthly": "720",
        "vacancy_rate": "5",
        "recoverable_charges_monthly": "40",
        "non_recoverable_charges_monthly": "25",
        "property_tax": "900",
        "pno": "120",
        "management_fee": "7",
        "tmi": "30",
        "regime": "reel",
        "amortization_enabled": "true",
    }
