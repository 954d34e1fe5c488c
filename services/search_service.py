"""
Free-text search over customers and sales (case-insensitive substring match).
"""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional
from uuid import UUID

from domain.customer import Customer
from domain.sale import Sale
from services.analytics_service import resolve_customer_name


def _matches(term: str, *values: Optional[str]) -> bool:
    return any(term in value.lower() for value in values if value)


def search_customers(customers: Iterable[Customer], term: Optional[str]) -> List[Customer]:
    """Customers whose name, email or company contains the term."""

    needle = (term or "").strip().lower()
    if not needle:
        return list(customers)
    return [c for c in customers if _matches(needle, c.name, c.email, c.company)]


def search_sales(
    sales: Iterable[Sale],
    term: Optional[str],
    customers_by_id: Mapping[UUID, Customer],
) -> List[Sale]:
    """Sales whose customer name, product or status contains the term."""

    needle = (term or "").strip().lower()
    if not needle:
        return list(sales)
    return [
        s for s in sales
        if _matches(needle, resolve_customer_name(s, customers_by_id), s.product, s.status.value)
    ]
