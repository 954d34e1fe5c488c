"""
Supabase-backed entity store.

Persistence only: rows are mapped to domain entities through repositories.rows.
Malformed rows met while listing are skipped and logged so one bad record
cannot take down a whole listing or an analytics call.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, TypeVar
from uuid import UUID

from domain.customer import Customer
from domain.product import Product
from domain.sale import Sale
from domain.user import User
from repositories.rows import (
    customer_to_row,
    product_to_row,
    row_to_customer,
    row_to_product,
    row_to_sale,
    row_to_user,
    sale_to_row,
    user_to_row,
)
from repositories.store import DuplicateRecordError, EntityStore, RecordNotFoundError, Snapshot

logger = logging.getLogger(__name__)

# Supabase table names.
# Keep these aligned with your database schema.
_CUSTOMERS_TABLE: str = "customers"
_SALES_TABLE: str = "sales"
_PRODUCTS_TABLE: str = "products"
_USERS_TABLE: str = "users"

T = TypeVar("T")


def _check(response: Any, action: str) -> List[dict]:
    """Raise on a Supabase error; return the response rows."""

    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    return getattr(response, "data", None) or []


def _map_rows(rows: Iterable[dict], mapper: Callable[[dict], T], table: str) -> List[T]:
    records: List[T] = []
    for row in rows:
        try:
            records.append(mapper(row))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                f"Skipping malformed row in '{table}': {exc}",
                extra={"table": table, "reason": str(exc)},
            )
    return records


class SupabaseStore(EntityStore):
    """
    Entity store on Supabase tables.

    Args:
        client: Supabase client; built from settings when omitted
    """

    def __init__(self, client: Any = None) -> None:
        if client is None:
            from repositories.client import create_supabase_client

            client = create_supabase_client()
        self._client = client

    def _table(self, name: str) -> Any:
        return self._client.table(name)

    def _select_all(self, table: str) -> List[dict]:
        return _check(self._table(table).select("*").execute(), f"list {table}")

    def _select_one(self, table: str, column: str, value: str) -> Optional[dict]:
        response = self._table(table).select("*").eq(column, value).limit(1).execute()
        rows = _check(response, f"fetch from {table}")
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def list_customers(self) -> List[Customer]:
        customers = _map_rows(self._select_all(_CUSTOMERS_TABLE), row_to_customer, _CUSTOMERS_TABLE)
        return sorted(customers, key=lambda c: c.created_at, reverse=True)

    def get_customer(self, customer_id: UUID) -> Optional[Customer]:
        row = self._select_one(_CUSTOMERS_TABLE, "customer_id", str(customer_id))
        return row_to_customer(row) if row else None

    def add_customer(self, customer: Customer) -> Customer:
        if self.find_customer_by_email(customer.email) is not None:
            raise DuplicateRecordError(f"Customer email already exists: {customer.email}")
        response = self._table(_CUSTOMERS_TABLE).insert(customer_to_row(customer)).execute()
        _check(response, "create customer")
        return customer

    def update_customer(self, customer_id: UUID, **changes: Any) -> Customer:
        existing = self.get_customer(customer_id)
        if existing is None:
            raise RecordNotFoundError(f"Customer not found: {customer_id}")
        updated = existing.with_updates(**changes)
        if "email" in changes:
            other = self.find_customer_by_email(updated.email)
            if other is not None and other.customer_id != customer_id:
                raise DuplicateRecordError(f"Customer email already exists: {updated.email}")

        payload = customer_to_row(updated)
        del payload["customer_id"], payload["created_at_utc"]
        response = (
            self._table(_CUSTOMERS_TABLE)
            .update(payload)
            .eq("customer_id", str(customer_id))
            .execute()
        )
        _check(response, "update customer")
        return updated

    def delete_customer(self, customer_id: UUID) -> None:
        if self.get_customer(customer_id) is None:
            raise RecordNotFoundError(f"Customer not found: {customer_id}")
        response = self._table(_CUSTOMERS_TABLE).delete().eq("customer_id", str(customer_id)).execute()
        _check(response, "delete customer")

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    def list_sales(self) -> List[Sale]:
        sales = _map_rows(self._select_all(_SALES_TABLE), row_to_sale, _SALES_TABLE)
        return sorted(sales, key=lambda s: s.created_at, reverse=True)

    def get_sale(self, sale_id: UUID) -> Optional[Sale]:
        row = self._select_one(_SALES_TABLE, "sale_id", str(sale_id))
        return row_to_sale(row) if row else None

    def add_sale(self, sale: Sale) -> Sale:
        response = self._table(_SALES_TABLE).insert(sale_to_row(sale)).execute()
        _check(response, "record sale")
        return sale

    def update_sale(self, sale_id: UUID, **changes: Any) -> Sale:
        existing = self.get_sale(sale_id)
        if existing is None:
            raise RecordNotFoundError(f"Sale not found: {sale_id}")
        updated = existing.with_updates(**changes)

        payload = sale_to_row(updated)
        del payload["sale_id"], payload["created_at_utc"]
        response = self._table(_SALES_TABLE).update(payload).eq("sale_id", str(sale_id)).execute()
        _check(response, "update sale")
        return updated

    def delete_sale(self, sale_id: UUID) -> None:
        if self.get_sale(sale_id) is None:
            raise RecordNotFoundError(f"Sale not found: {sale_id}")
        response = self._table(_SALES_TABLE).delete().eq("sale_id", str(sale_id)).execute()
        _check(response, "delete sale")

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        products = _map_rows(self._select_all(_PRODUCTS_TABLE), row_to_product, _PRODUCTS_TABLE)
        return sorted(products, key=lambda p: p.name)

    def add_product(self, product: Product) -> Product:
        if self._select_one(_PRODUCTS_TABLE, "name", product.name) is not None:
            raise DuplicateRecordError(f"Product already exists: {product.name}")
        response = self._table(_PRODUCTS_TABLE).insert(product_to_row(product)).execute()
        _check(response, "create product")
        return product

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._select_one(_USERS_TABLE, "email", email.strip().lower())
        return row_to_user(row) if row else None

    def add_user(self, user: User) -> User:
        if self.get_user_by_email(user.email) is not None:
            raise DuplicateRecordError(f"User already exists: {user.email}")
        response = self._table(_USERS_TABLE).insert(user_to_row(user)).execute()
        _check(response, "create user")
        return user

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        # Two reads, no transaction: a write landing between them is visible
        # in one collection only.
        return Snapshot(customers=tuple(self.list_customers()), sales=tuple(self.list_sales()))

    def replace_all(
        self,
        customers: Iterable[Customer],
        sales: Iterable[Sale],
        products: Iterable[Product],
    ) -> None:
        payloads = (
            (_CUSTOMERS_TABLE, [customer_to_row(c) for c in customers]),
            (_SALES_TABLE, [sale_to_row(s) for s in sales]),
            (_PRODUCTS_TABLE, [product_to_row(p) for p in products]),
        )

        # Not atomic: PostgREST gives no transaction across these calls. If an
        # insert fails the tables stay cleared or partially filled.
        for table, key in (
            (_SALES_TABLE, "sale_id"),
            (_CUSTOMERS_TABLE, "customer_id"),
            (_PRODUCTS_TABLE, "name"),
        ):
            response = self._table(table).delete().not_.is_(key, "null").execute()
            _check(response, f"clear {table}")

        for table, rows in payloads:
            if not rows:
                continue
            try:
                _check(self._table(table).insert(rows).execute(), f"bulk insert into {table}")
            except RuntimeError:
                logger.error(
                    "Supabase store left partially replaced",
                    extra={"table": table, "rows": len(rows)},
                )
                raise

        logger.info("Supabase store contents replaced")


__all__ = ["SupabaseStore"]
