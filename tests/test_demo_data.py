"""
Tests for `services/demo_data_service.py`.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from domain.product import DEFAULT_CATALOG
from repositories.store import InMemoryStore
from services.demo_data_service import SALES_COUNT, generate_demo_data, load_demo_data


def test_generate_demo_data_shape(now) -> None:
    dataset = generate_demo_data(seed=7, now=now)

    assert len(dataset.customers) == 20
    assert len(dataset.sales) == SALES_COUNT
    assert dataset.products == list(DEFAULT_CATALOG)

    customer_ids = {c.customer_id for c in dataset.customers}
    catalog_names = {p.name for p in DEFAULT_CATALOG}
    for sale in dataset.sales:
        assert sale.customer_id in customer_ids
        assert sale.product in catalog_names
        assert 1 <= sale.quantity <= 5
        assert now - timedelta(days=90) <= sale.created_at <= now
    for customer in dataset.customers:
        assert Decimal("100") <= customer.total_spent <= Decimal("2099")
        assert now - timedelta(days=365) <= customer.created_at <= now


def test_generate_demo_data_is_reproducible_with_seed(now) -> None:
    assert generate_demo_data(seed=42, now=now) == generate_demo_data(seed=42, now=now)
    assert generate_demo_data(seed=1, now=now) != generate_demo_data(seed=2, now=now)


def test_load_demo_data_replaces_store(make_customer, now) -> None:
    store = InMemoryStore(customers=[make_customer(name="Pre-existing")])

    dataset = load_demo_data(store, seed=3, now=now)

    snapshot = store.snapshot()
    assert len(snapshot.customers) == len(dataset.customers)
    assert len(snapshot.sales) == SALES_COUNT
    assert store.find_customer_by_name("Pre-existing") is None
