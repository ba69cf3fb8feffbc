"""
Pytest fixtures for VoltManager backend tests.

Every test gets its own application and therefore its own in-memory store.
The default `app` starts empty; `seeded_app` loads the packaged fixtures.
"""

import pytest
from voltmanager import create_app
from voltmanager.extensions import db
from voltmanager.models import Product, Technician, RepairOrder
from voltmanager.time_utils import utcnow


def _make_app(seed: bool):
    return create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SEED_ON_STARTUP': seed,
        'SIMULATED_LATENCY_MS': 0,
    })


@pytest.fixture(scope='function')
def app():
    """Application with an empty store."""
    app = _make_app(seed=False)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def seeded_app():
    """Application seeded from the packaged fixtures."""
    app = _make_app(seed=True)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def seeded_client(seeded_app):
    return seeded_app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    yield db.session
    db.session.rollback()


@pytest.fixture(scope='function')
def product_a(db_session):
    """Five on hand at $10.00."""
    product = Product(
        id="p-a",
        seq=1,
        sku="PROD-A-001",
        name="Product A",
        category="Accessories",
        price_cents=1000,
        cost_cents=400,
        stock=5,
        min_stock=2,
        warranty_months=6,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def product_b(db_session):
    """Low stock: 2 on hand, minimum 5."""
    product = Product(
        id="p-b",
        seq=2,
        sku="PROD-B-001",
        name="Product B",
        category="Batteries",
        price_cents=2500,
        cost_cents=1500,
        stock=2,
        min_stock=5,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def technician_t1(db_session):
    tech = Technician(id="T1", seq=1, name="Marcus Reed", skills=["Screens"], status="available")
    db_session.add(tech)
    db_session.commit()
    return tech


@pytest.fixture(scope='function')
def repair_order(db_session):
    order = RepairOrder(
        id="ro-1",
        seq=1,
        created_date=utcnow(),
        customer_name="Jamal Carter",
        customer_phone="(555) 118-9057",
        device_info="iPhone 13",
        issue="Cracked screen",
        status="pending",
        parts=[],
    )
    db_session.add(order)
    db_session.commit()
    return order
