"""
Entity store.

Holds customers, sales, products and users behind an explicit object with
defined read and write operations. The API receives the store through a
dependency; nothing reads ambient global state.

The store does not enforce analytics rules. It enforces uniqueness (customer
email, product name, user email) and hands out consistent point-in-time
snapshots.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from domain.customer import Customer
from domain.product import DEFAULT_CATALOG, Product
from domain.sale import Sale
from domain.user import User

logger = logging.getLogger(__name__)


class RecordNotFoundError(LookupError):
    """Raised when a record id does not exist in the store."""


class DuplicateRecordError(ValueError):
    """Raised when a write would break a uniqueness rule."""


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Point-in-time view of customers and sales, taken together."""
    customers: Tuple[Customer, ...]
    sales: Tuple[Sale, ...]

    def customers_by_id(self) -> Dict[UUID, Customer]:
        return {c.customer_id: c for c in self.customers}


def _newest_first(records: Iterable[Any]) -> List[Any]:
    return sorted(records, key=lambda r: r.created_at, reverse=True)


class EntityStore(ABC):
    """Read/write operations every store backend provides."""

    # Customers
    @abstractmethod
    def list_customers(self) -> List[Customer]:
        """All customers, newest first."""

    @abstractmethod
    def get_customer(self, customer_id: UUID) -> Optional[Customer]:
        ...

    @abstractmethod
    def add_customer(self, customer: Customer) -> Customer:
        ...

    @abstractmethod
    def update_customer(self, customer_id: UUID, **changes: Any) -> Customer:
        ...

    @abstractmethod
    def delete_customer(self, customer_id: UUID) -> None:
        ...

    # Sales
    @abstractmethod
    def list_sales(self) -> List[Sale]:
        """All sales, newest first."""

    @abstractmethod
    def get_sale(self, sale_id: UUID) -> Optional[Sale]:
        ...

    @abstractmethod
    def add_sale(self, sale: Sale) -> Sale:
        ...

    @abstractmethod
    def update_sale(self, sale_id: UUID, **changes: Any) -> Sale:
        ...

    @abstractmethod
    def delete_sale(self, sale_id: UUID) -> None:
        ...

    # Products
    @abstractmethod
    def list_products(self) -> List[Product]:
        """Catalog sorted by name."""

    @abstractmethod
    def add_product(self, product: Product) -> Product:
        ...

    # Users
    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def add_user(self, user: User) -> User:
        ...

    # Bulk
    @abstractmethod
    def snapshot(self) -> Snapshot:
        ...

    @abstractmethod
    def replace_all(
        self,
        customers: Iterable[Customer],
        sales: Iterable[Sale],
        products: Iterable[Product],
    ) -> None:
        """Swap the full customer, sale and product collections (users are kept)."""

    def find_customer_by_email(self, email: str) -> Optional[Customer]:
        wanted = email.strip().lower()
        for customer in self.list_customers():
            if customer.email.strip().lower() == wanted:
                return customer
        return None

    def find_customer_by_name(self, name: str) -> Optional[Customer]:
        """First customer whose name matches exactly (case-insensitive)."""

        wanted = name.strip().lower()
        for customer in self.list_customers():
            if customer.name.strip().lower() == wanted:
                return customer
        return None


class InMemoryStore(EntityStore):
    """
    Process-local store.

    A single lock guards all collections, so snapshot() always returns
    customers and sales from the same moment.
    """

    def __init__(
        self,
        customers: Iterable[Customer] = (),
        sales: Iterable[Sale] = (),
        products: Iterable[Product] = DEFAULT_CATALOG,
        users: Iterable[User] = (),
    ) -> None:
        self._lock = threading.RLock()
        self._customers: Dict[UUID, Customer] = {}
        self._sales: Dict[UUID, Sale] = {}
        self._products: Dict[str, Product] = {}
        self._users: Dict[str, User] = {}

        for customer in customers:
            self.add_customer(customer)
        for sale in sales:
            self.add_sale(sale)
        for product in products:
            self.add_product(product)
        for user in users:
            self.add_user(user)

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def _check_email_free(self, email: str, exclude: Optional[UUID] = None) -> None:
        wanted = email.strip().lower()
        for customer in self._customers.values():
            if customer.customer_id != exclude and customer.email.strip().lower() == wanted:
                raise DuplicateRecordError(f"Customer email already exists: {email}")

    def list_customers(self) -> List[Customer]:
        with self._lock:
            return _newest_first(self._customers.values())

    def get_customer(self, customer_id: UUID) -> Optional[Customer]:
        with self._lock:
            return self._customers.get(customer_id)

    def add_customer(self, customer: Customer) -> Customer:
        with self._lock:
            if customer.customer_id in self._customers:
                raise DuplicateRecordError(f"Customer already exists: {customer.customer_id}")
            self._check_email_free(customer.email)
            self._customers[customer.customer_id] = customer
        logger.debug(f"Added customer {customer.customer_id}")
        return customer

    def update_customer(self, customer_id: UUID, **changes: Any) -> Customer:
        with self._lock:
            existing = self._customers.get(customer_id)
            if existing is None:
                raise RecordNotFoundError(f"Customer not found: {customer_id}")
            updated = existing.with_updates(**changes)
            if "email" in changes:
                self._check_email_free(updated.email, exclude=customer_id)
            self._customers[customer_id] = updated
            return updated

    def delete_customer(self, customer_id: UUID) -> None:
        # Sales referencing this customer are kept as-is.
        with self._lock:
            if self._customers.pop(customer_id, None) is None:
                raise RecordNotFoundError(f"Customer not found: {customer_id}")

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    def list_sales(self) -> List[Sale]:
        with self._lock:
            return _newest_first(self._sales.values())

    def get_sale(self, sale_id: UUID) -> Optional[Sale]:
        with self._lock:
            return self._sales.get(sale_id)

    def add_sale(self, sale: Sale) -> Sale:
        with self._lock:
            if sale.sale_id in self._sales:
                raise DuplicateRecordError(f"Sale already exists: {sale.sale_id}")
            self._sales[sale.sale_id] = sale
        return sale

    def update_sale(self, sale_id: UUID, **changes: Any) -> Sale:
        with self._lock:
            existing = self._sales.get(sale_id)
            if existing is None:
                raise RecordNotFoundError(f"Sale not found: {sale_id}")
            updated = existing.with_updates(**changes)
            self._sales[sale_id] = updated
            return updated

    def delete_sale(self, sale_id: UUID) -> None:
        with self._lock:
            if self._sales.pop(sale_id, None) is None:
                raise RecordNotFoundError(f"Sale not found: {sale_id}")

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        with self._lock:
            return sorted(self._products.values(), key=lambda p: p.name)

    def add_product(self, product: Product) -> Product:
        with self._lock:
            if product.name in self._products:
                raise DuplicateRecordError(f"Product already exists: {product.name}")
            self._products[product.name] = product
        return product

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return self._users.get(email.strip().lower())

    def add_user(self, user: User) -> User:
        with self._lock:
            if user.email in self._users:
                raise DuplicateRecordError(f"User already exists: {user.email}")
            self._users[user.email] = user
        return user

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(
                customers=tuple(_newest_first(self._customers.values())),
                sales=tuple(_newest_first(self._sales.values())),
            )

    def replace_all(
        self,
        customers: Iterable[Customer],
        sales: Iterable[Sale],
        products: Iterable[Product],
    ) -> None:
        replacement = InMemoryStore(customers=customers, sales=sales, products=products)
        with self._lock:
            self._customers = replacement._customers
            self._sales = replacement._sales
            self._products = replacement._products
        logger.info(
            f"Store contents replaced: {len(self._customers)} customers, "
            f"{len(self._sales)} sales, {len(self._products)} products"
        )


__all__ = [
    "EntityStore",
    "InMemoryStore",
    "Snapshot",
    "RecordNotFoundError",
    "DuplicateRecordError",
]
