"""
Pytest configuration and shared fixtures.

This file adds the project root to the Python path so that tests can import
domain, repositories, services and api, and provides small record factories.
"""

import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.customer import Customer  # noqa: E402
from domain.sale import Sale  # noqa: E402

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_customer():
    """Factory for valid customers; override any field by keyword."""

    def _make(**overrides) -> Customer:
        fields = {
            "customer_id": uuid4(),
            "name": "Jane Doe",
            "email": f"jane.{uuid4().hex[:8]}@example.com",
            "created_at": NOW,
            "total_spent": Decimal("0.00"),
            "total_orders": 0,
        }
        fields.update(overrides)
        return Customer(**fields)

    return _make


@pytest.fixture
def make_sale():
    """Factory for valid sales; override any field by keyword."""

    def _make(**overrides) -> Sale:
        fields = {
            "sale_id": uuid4(),
            "customer_id": None,
            "customer_name": "Jane Doe",
            "product": "Wireless Mouse",
            "quantity": 1,
            "unit_price": Decimal("10.00"),
            "created_at": NOW,
        }
        fields.update(overrides)
        return Sale(**fields)

    return _make
