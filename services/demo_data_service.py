"""
Demo data generation.

Produces the sample dataset the dashboard ships with: the default product
catalog, 20 customers and 150 sales spread over recent history. Pass a seed
for reproducible output (tests, screenshots).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from domain.customer import Customer, CustomerStatus
from domain.product import DEFAULT_CATALOG, Product
from domain.sale import Sale, SaleStatus
from domain.time import utc_now
from repositories.store import EntityStore

logger = logging.getLogger(__name__)

CUSTOMER_NAMES = (
    "John Smith", "Sarah Johnson", "Mike Davis", "Emily Brown", "David Wilson",
    "Lisa Anderson", "Chris Taylor", "Amanda Martinez", "Robert Garcia", "Jennifer Lee",
    "Michael Thompson", "Jessica White", "Daniel Harris", "Ashley Martin", "James Jackson",
    "Stephanie Moore", "Andrew Young", "Nicole Allen", "Kevin King", "Rachel Wright",
)

COMPANIES = (
    "TechCorp Inc.", "Digital Solutions", "Innovation Labs", "Future Systems",
    "Smart Technologies", "NextGen Corp", "Advanced Computing", "Modern Solutions",
    "Elite Enterprises", "Premier Services",
)

CITIES = (
    "New York", "Los Angeles", "Chicago", "Houston", "Phoenix",
    "Philadelphia", "San Antonio", "San Diego", "Dallas", "San Jose",
)

SALES_COUNT = 150
CUSTOMER_HISTORY_DAYS = 365
SALES_HISTORY_DAYS = 90


@dataclass(frozen=True, slots=True)
class DemoDataset:
    customers: List[Customer]
    sales: List[Sale]
    products: List[Product]


def _random_uuid(rng: random.Random) -> UUID:
    return UUID(int=rng.getrandbits(128), version=4)


def _random_past(rng: random.Random, now: datetime, max_days: int) -> datetime:
    return now - timedelta(seconds=rng.random() * max_days * 24 * 60 * 60)


def _random_phone(rng: random.Random) -> str:
    return f"+1-{rng.randint(100, 999)}-{rng.randint(100, 999)}-{rng.randint(1000, 9999)}"


def generate_demo_data(seed: Optional[int] = None, now: Optional[datetime] = None) -> DemoDataset:
    """
    Build a fresh demo dataset.

    Customer totals are random stored values, independent of the generated
    sales (they are not derived from them).
    """

    rng = random.Random(seed)
    now = now or utc_now()

    customers: List[Customer] = []
    for name in CUSTOMER_NAMES:
        customers.append(Customer(
            customer_id=_random_uuid(rng),
            name=name,
            email=f"{name.lower().replace(' ', '.')}@email.com",
            phone=_random_phone(rng),
            company=rng.choice(COMPANIES),
            city=rng.choice(CITIES),
            total_spent=Decimal(rng.randint(100, 2099)),
            total_orders=rng.randint(1, 20),
            status=CustomerStatus.ACTIVE if rng.random() > 0.2 else CustomerStatus.INACTIVE,
            created_at=_random_past(rng, now, CUSTOMER_HISTORY_DAYS),
        ))

    sales: List[Sale] = []
    for _ in range(SALES_COUNT):
        customer = rng.choice(customers)
        sales.append(Sale(
            sale_id=_random_uuid(rng),
            customer_id=customer.customer_id,
            customer_name=customer.name,
            product=rng.choice(DEFAULT_CATALOG).name,
            quantity=rng.randint(1, 5),
            unit_price=Decimal(rng.randint(50, 549)),
            status=SaleStatus.COMPLETED if rng.random() > 0.1 else SaleStatus.PENDING,
            created_at=_random_past(rng, now, SALES_HISTORY_DAYS),
        ))

    return DemoDataset(customers=customers, sales=sales, products=list(DEFAULT_CATALOG))


def load_demo_data(store: EntityStore, seed: Optional[int] = None, now: Optional[datetime] = None) -> DemoDataset:
    """Replace the store's customers, sales and products with a new demo dataset."""

    dataset = generate_demo_data(seed=seed, now=now)
    store.replace_all(dataset.customers, dataset.sales, dataset.products)
    logger.info(
        f"Loaded demo data: {len(dataset.customers)} customers, {len(dataset.sales)} sales",
        extra={"seed": seed},
    )
    return dataset


__all__ = ["DemoDataset", "generate_demo_data", "load_demo_data"]
