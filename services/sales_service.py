"""
Sales and customer record service.

Builds domain records from user input and writes them through an EntityStore.
Identity (uuid4) and creation time (UTC now) are assigned here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

from domain.customer import Customer, CustomerStatus
from domain.sale import Sale, SaleStatus
from domain.time import utc_now
from repositories.store import EntityStore, RecordNotFoundError

logger = logging.getLogger(__name__)


def create_customer(
    store: EntityStore,
    *,
    name: str,
    email: str,
    phone: Optional[str] = None,
    company: Optional[str] = None,
    city: Optional[str] = None,
    status: CustomerStatus | str = CustomerStatus.ACTIVE,
    total_spent: Decimal | str | int = Decimal("0.00"),
    total_orders: int = 0,
    created_at: Optional[datetime] = None,
) -> Customer:
    """
    Create and store a new customer.

    Raises:
        InvalidRecordError: If any field is invalid
        DuplicateRecordError: If the email is already used
    """

    customer = Customer(
        customer_id=uuid4(),
        name=name.strip(),
        email=email.strip(),
        phone=phone,
        company=company,
        city=city,
        status=status,
        total_spent=total_spent,
        total_orders=total_orders,
        created_at=created_at or utc_now(),
    )
    store.add_customer(customer)
    logger.info(f"Created customer {customer.customer_id}", extra={"customer_id": str(customer.customer_id)})
    return customer


def _require_customer(store: EntityStore, customer_id: UUID) -> Customer:
    customer = store.get_customer(customer_id)
    if customer is None:
        raise RecordNotFoundError(f"Customer not found: {customer_id}")
    return customer


def create_sale(
    store: EntityStore,
    *,
    customer_id: UUID,
    product: str,
    quantity: int,
    unit_price: Decimal | str | int,
    status: SaleStatus | str = SaleStatus.COMPLETED,
    created_at: Optional[datetime] = None,
) -> Sale:
    """
    Record a sale for an existing customer.

    The customer's current name is captured on the sale as a point-in-time
    snapshot. amount is derived from quantity and unit_price.

    Raises:
        RecordNotFoundError: If the customer does not exist
        InvalidRecordError: If any field is invalid
    """

    customer = _require_customer(store, customer_id)
    sale = Sale(
        sale_id=uuid4(),
        customer_id=customer.customer_id,
        customer_name=customer.name,
        product=product.strip(),
        quantity=quantity,
        unit_price=unit_price,
        status=status,
        created_at=created_at or utc_now(),
    )
    store.add_sale(sale)
    logger.info(
        f"Recorded sale {sale.sale_id} for {sale.amount}",
        extra={"sale_id": str(sale.sale_id), "customer_id": str(customer.customer_id)},
    )
    return sale


def update_sale(store: EntityStore, sale_id: UUID, **changes: Any) -> Sale:
    """
    Partially update a sale.

    Moving a sale to another customer refreshes the customer_name snapshot.
    amount follows quantity and unit_price automatically.
    """

    new_customer_id = changes.get("customer_id")
    if new_customer_id is not None:
        changes["customer_name"] = _require_customer(store, new_customer_id).name
    return store.update_sale(sale_id, **changes)


__all__ = ["create_customer", "create_sale", "update_sale"]
