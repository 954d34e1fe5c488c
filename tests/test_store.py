"""
Tests for `repositories/store.py` (InMemoryStore).

Covers contract rules:
- Customer email and product name are unique.
- Lists are newest first; products are sorted by name.
- Deleting a customer leaves their sales in place.
- snapshot() returns customers and sales together; replace_all keeps users.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from domain.errors import InvalidRecordError
from domain.product import DEFAULT_CATALOG, Product
from domain.user import User
from repositories.store import DuplicateRecordError, InMemoryStore, RecordNotFoundError


def test_store_defaults_to_catalog() -> None:
    store = InMemoryStore()

    names = [p.name for p in store.list_products()]
    assert len(names) == len(DEFAULT_CATALOG)
    assert names == sorted(names)


def test_store_customer_email_is_unique(make_customer) -> None:
    store = InMemoryStore()
    store.add_customer(make_customer(email="dup@example.com"))

    with pytest.raises(DuplicateRecordError):
        store.add_customer(make_customer(email="DUP@example.com"))


def test_store_update_customer_checks_email(make_customer) -> None:
    first = make_customer(email="first@example.com")
    second = make_customer(email="second@example.com")
    store = InMemoryStore(customers=[first, second])

    with pytest.raises(DuplicateRecordError):
        store.update_customer(second.customer_id, email="first@example.com")

    updated = store.update_customer(second.customer_id, email="second@example.com", city="Dallas")
    assert updated.city == "Dallas"
    assert store.get_customer(second.customer_id).city == "Dallas"


def test_store_update_missing_records_raise() -> None:
    store = InMemoryStore()

    with pytest.raises(RecordNotFoundError):
        store.update_customer(uuid4(), name="x")
    with pytest.raises(RecordNotFoundError):
        store.update_sale(uuid4(), quantity=2)
    with pytest.raises(RecordNotFoundError):
        store.delete_customer(uuid4())
    with pytest.raises(RecordNotFoundError):
        store.delete_sale(uuid4())


def test_store_update_sale_validates(make_sale) -> None:
    sale = make_sale(quantity=2, unit_price=Decimal("5.00"))
    store = InMemoryStore(sales=[sale])

    assert store.update_sale(sale.sale_id, quantity=4).amount == Decimal("20.00")
    with pytest.raises(InvalidRecordError):
        store.update_sale(sale.sale_id, quantity=0)
    assert store.get_sale(sale.sale_id).quantity == 4


def test_store_lists_newest_first(make_customer, make_sale, now) -> None:
    old = make_customer(created_at=now - timedelta(days=3))
    new = make_customer(created_at=now)
    store = InMemoryStore(customers=[old, new])
    store.add_sale(make_sale(created_at=now - timedelta(days=1), product="Old"))
    store.add_sale(make_sale(created_at=now, product="New"))

    assert [c.customer_id for c in store.list_customers()] == [new.customer_id, old.customer_id]
    assert [s.product for s in store.list_sales()] == ["New", "Old"]


def test_store_delete_customer_keeps_sales(make_customer, make_sale) -> None:
    customer = make_customer()
    sale = make_sale(customer_id=customer.customer_id)
    store = InMemoryStore(customers=[customer], sales=[sale])

    store.delete_customer(customer.customer_id)

    snapshot = store.snapshot()
    assert snapshot.customers == ()
    assert snapshot.sales == (sale,)
    assert snapshot.customers_by_id() == {}


def test_store_find_customer_by_name_and_email(make_customer) -> None:
    customer = make_customer(name="Kevin King", email="kevin.king@email.com")
    store = InMemoryStore(customers=[customer])

    assert store.find_customer_by_name(" kevin king ") == customer
    assert store.find_customer_by_email("KEVIN.KING@email.com") == customer
    assert store.find_customer_by_name("Nobody") is None


def test_store_product_name_is_unique() -> None:
    store = InMemoryStore(products=[])
    store.add_product(Product("Widget", Decimal("1.00")))

    with pytest.raises(DuplicateRecordError):
        store.add_product(Product("Widget", Decimal("2.00")))


def test_store_replace_all_keeps_users(make_customer, make_sale) -> None:
    user = User(user_id=1, email="Admin@Company.com", name="Admin", role="admin", password_hash="x")
    store = InMemoryStore(customers=[make_customer()], users=[user])

    store.replace_all([make_customer(), make_customer()], [make_sale()], [Product("Widget", "3.50")])

    snapshot = store.snapshot()
    assert len(snapshot.customers) == 2
    assert len(snapshot.sales) == 1
    assert [p.name for p in store.list_products()] == ["Widget"]
    assert store.get_user_by_email("admin@company.com") == user


def test_store_replace_all_is_all_or_nothing(make_customer) -> None:
    original = make_customer()
    store = InMemoryStore(customers=[original])

    with pytest.raises(DuplicateRecordError):
        store.replace_all(
            [make_customer(email="same@example.com"), make_customer(email="same@example.com")],
            [],
            [],
        )

    assert store.list_customers() == [original]
