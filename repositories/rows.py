"""
Row mapping between storage rows (dicts) and domain entities.

Used by the Supabase store. Row keys follow the database schema; domain
objects never see them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import UUID

from domain.customer import Customer
from domain.money import to_decimal
from domain.product import Product
from domain.sale import Sale
from domain.time import parse_utc_datetime, require_utc_timestamp
from domain.user import User


def to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def _optional_uuid(value: Any) -> Optional[UUID]:
    if value is None or value == "":
        return None
    return UUID(str(value))


def row_to_customer(row: Mapping[str, Any]) -> Customer:
    return Customer(
        customer_id=UUID(str(row["customer_id"])),
        name=str(row["name"]),
        email=str(row["email"]),
        phone=row.get("phone"),
        company=row.get("company"),
        city=row.get("city"),
        total_spent=to_decimal(row.get("total_spent") or "0", name="total_spent"),
        total_orders=int(row.get("total_orders") or 0),
        status=str(row.get("status") or "active"),
        created_at=parse_utc_datetime(row["created_at_utc"]),
    )


def customer_to_row(customer: Customer) -> dict[str, Any]:
    return {
        "customer_id": str(customer.customer_id),
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "company": customer.company,
        "city": customer.city,
        "total_spent": str(customer.total_spent),
        "total_orders": customer.total_orders,
        "status": customer.status.value,
        "created_at_utc": to_iso_utc(customer.created_at, name="created_at"),
    }


def row_to_sale(row: Mapping[str, Any]) -> Sale:
    """
    Convert a sales row into a Sale.

    The stored amount column is ignored; Sale.amount is always derived.
    """

    return Sale(
        sale_id=UUID(str(row["sale_id"])),
        customer_id=_optional_uuid(row.get("customer_id")),
        customer_name=str(row.get("customer_name") or ""),
        product=str(row["product"]),
        quantity=int(row["quantity"]),
        unit_price=to_decimal(row["unit_price"], name="unit_price"),
        status=str(row.get("status") or "completed"),
        created_at=parse_utc_datetime(row["created_at_utc"]),
    )


def sale_to_row(sale: Sale) -> dict[str, Any]:
    # amount is written for SQL-side reporting only
    return {
        "sale_id": str(sale.sale_id),
        "customer_id": str(sale.customer_id) if sale.customer_id else None,
        "customer_name": sale.customer_name,
        "product": sale.product,
        "quantity": sale.quantity,
        "unit_price": str(sale.unit_price),
        "amount": str(sale.amount),
        "status": sale.status.value,
        "created_at_utc": to_iso_utc(sale.created_at, name="created_at"),
    }


def row_to_product(row: Mapping[str, Any]) -> Product:
    return Product(
        name=str(row["name"]),
        price=to_decimal(row["price"], name="price"),
        category=row.get("category"),
    )


def product_to_row(product: Product) -> dict[str, Any]:
    return {
        "name": product.name,
        "price": str(product.price),
        "category": product.category,
    }


def row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=str(row["email"]),
        name=str(row["name"]),
        role=str(row["role"]),
        password_hash=str(row["password_hash"]),
    )


def user_to_row(user: User) -> dict[str, Any]:
    return {
        "user_id": user.user_id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "password_hash": user.password_hash,
    }
