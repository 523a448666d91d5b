"""
Shared pytest fixtures and configuration for all tests.

Provides common fixtures for Flask application testing, database sessions,
and test data initialization.
"""

import pytest
import sys
import os
from decimal import Decimal

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from canledger import create_app
from canledger.models import db


@pytest.fixture(scope='session')
def app_factory():
    """Factory fixture for creating test app instances."""
    def _create_app(config='testing'):
        app = create_app(config)
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        return app
    return _create_app


@pytest.fixture(scope='function')
def fresh_app(app_factory):
    """Create a fresh application for each test with clean database."""
    app = app_factory()

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(fresh_app):
    """Create a test client for each test."""
    return fresh_app.test_client()


@pytest.fixture(scope='function')
def db_session(fresh_app):
    """Provide a database session for testing."""
    with fresh_app.app_context():
        yield db.session
        db.session.rollback()


@pytest.fixture(scope='function')
def init_database(fresh_app):
    """
    Initialize database with test data.

    Creates:
    - Customers: Asha Traders (shop), Bharat Sharma (monthly),
      Chetan Rao (monthly, baseline of 3 cans), Devika (order)
    - One active price row: shop 20, monthly 25, order 30

    Yields a dict of customer ids keyed by short name.
    """
    from canledger.models import Customer, Price

    with fresh_app.app_context():
        customers = {
            'shop': Customer(
                name='Asha Traders',
                phone_number='9876500001',
                address='12 Market Road',
                customer_type='shop',
                can_qty=5
            ),
            'monthly': Customer(
                name='Bharat Sharma',
                phone_number='9876500002',
                alternate_number='9876500099',
                address='4 Labour Colony',
                customer_type='monthly',
                can_qty=2,
                advance_amount=Decimal('500.00')
            ),
            'baseline': Customer(
                name='Chetan Rao',
                phone_number='9876500003',
                address='88 Nai Abadi',
                customer_type='monthly',
                can_qty=3
            ),
            'order': Customer(
                name='Devika',
                phone_number='9876500004',
                address='1 Station Road',
                customer_type='order',
                can_qty=1
            ),
        }
        db.session.add_all(customers.values())

        db.session.add(Price(
            shop_price=Decimal('20.00'),
            monthly_price=Decimal('25.00'),
            order_price=Decimal('30.00'),
            is_active=True
        ))

        db.session.commit()
        yield {key: customer.id for key, customer in customers.items()}

        # Cleanup is handled by fresh_app fixture


def post_update(client, customer_id, on_date, delivered=0, collected=0, **extra):
    """Helper to post one daily update."""
    payload = {
        'customer_id': customer_id,
        'date': on_date,
        'delivered_qty': delivered,
        'collected_qty': collected,
    }
    payload.update(extra)
    return client.post('/api/daily-updates', json=payload)


# Pytest configuration
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "api: marks tests as API endpoint tests"
    )
    config.addinivalue_line(
        "markers", "ledger: marks tests of the running can balance"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add markers based on test class/function names."""
    for item in items:
        # Add api marker to all route tests
        if 'routes' in item.nodeid.lower() or 'API' in item.nodeid:
            item.add_marker(pytest.mark.api)

        # Add ledger marker to balance tests
        keywords = ['holding', 'ledger', 'rechain', 'balance']
        if any(kw in item.name.lower() for kw in keywords):
            item.add_marker(pytest.mark.ledger)
