"""Shared test fixtures for the Salesdesk test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, no seed fixture)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- seed_data: the demo fixture (units, sellers, links, sample sales)
- make_sale: build an unsaved Sale with sensible defaults
- add_sale: same, but saved
"""

from datetime import date

import pytest

from salesdesk import create_app
from salesdesk.extensions import db as _db
from salesdesk.models.sale import Sale
from salesdesk.seed import SALES, SELLERS, UNITS, seed_demo_data


SALE_DEFAULTS = {
    "registered_on": date(2025, 3, 10),
    "unit_name": "São Paulo",
    "seller_name": "Ana Silva",
    "customer_name": "Test Customer",
    "phone": "(11) 90000-0000",
    "category": "Product A",
    "source": "Website",
    "status": "Active",
    "stage": "Lead",
    "initial_value": 0.0,
    "sale_value": 0.0,
}


def build_sale(**overrides):
    values = dict(SALE_DEFAULTS)
    values.update(overrides)
    return Sale(**values)


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def seed_data(db_session):
    """Load the demo fixture. Returns counts and handy names for assertions."""
    seed_demo_data()
    return {
        "unit_count": len(UNITS),
        "seller_count": len(SELLERS),
        "sale_count": len(SALES),
        "first_customer": SALES[0]["customer_name"],
    }


@pytest.fixture
def make_sale():
    """Factory for unsaved sales (pure-function tests)."""
    return build_sale


@pytest.fixture
def add_sale(db_session):
    """Factory for saved sales. Phones are made unique unless given."""
    counter = {"n": 0}

    def _add(**overrides):
        counter["n"] += 1
        overrides.setdefault("phone", f"(11) 9{counter['n']:04d}-0000")
        sale = build_sale(**overrides)
        db_session.add(sale)
        db_session.commit()
        return sale

    return _add
