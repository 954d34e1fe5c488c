"""
CSV import service for customers and sales.

Imports rows from uploaded CSV text into the entity store with:
- Per-row validation (required fields, numeric parsing)
- Row-level error isolation: a bad row is skipped and reported, the rest import
- Summary statistics for the caller

Customer CSV columns: name, email, phone, company, city, status
Sales CSV columns:    customerName, product, quantity, unitPrice, status

Sales rows are matched to existing customers by name (case-insensitive).
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime
from io import StringIO
from typing import Optional

from domain.errors import InvalidRecordError
from domain.money import to_decimal
from domain.time import utc_now
from repositories.store import DuplicateRecordError, EntityStore
from services.sales_service import create_customer, create_sale

logger = logging.getLogger(__name__)

CUSTOMER_REQUIRED_FIELDS = ("name", "email")
SALE_REQUIRED_FIELDS = ("customerName", "product", "quantity", "unitPrice")


@dataclass
class ImportResult:
    """Results from a CSV import operation."""
    total_rows: int = 0
    imported: int = 0
    skipped: int = 0
    errors: list[dict] = field(default_factory=list)

    def skip(self, row_num: int, reason: str) -> None:
        self.skipped += 1
        self.errors.append({"row": row_num, "error": reason})


def validate_row(row: dict[str, str], required_fields: tuple[str, ...]) -> tuple[bool, str | None]:
    """
    Validate that a CSV row has all required fields.

    Returns:
        Tuple of (is_valid, error_message)
    """

    for name in required_fields:
        value = (row.get(name) or "").strip()
        if not value:
            return False, f"Missing required field: {name}"

    return True, None


def _read_rows(content: str) -> list[dict[str, str]]:
    # utf-8-sig files arrive with a BOM glued to the first header
    reader = csv.DictReader(StringIO(content.lstrip("\ufeff")))
    return [
        {k.strip(): (v or "") for k, v in row.items() if k is not None}
        for row in reader
    ]


def _optional(row: dict[str, str], key: str) -> str | None:
    value = (row.get(key) or "").strip()
    return value if value else None


def import_customers_csv(store: EntityStore, content: str, now: Optional[datetime] = None) -> ImportResult:
    """
    Import customers from CSV text.

    Rows without name or email, with invalid values, or whose email already
    exists are skipped.
    """

    created_at = now or utc_now()
    result = ImportResult()

    # Header is row 1
    for row_num, row in enumerate(_read_rows(content), start=2):
        result.total_rows += 1

        is_valid, error = validate_row(row, CUSTOMER_REQUIRED_FIELDS)
        if not is_valid:
            result.skip(row_num, error)
            continue

        try:
            create_customer(
                store,
                name=row["name"],
                email=row["email"],
                phone=_optional(row, "phone"),
                company=_optional(row, "company"),
                city=_optional(row, "city"),
                status=_optional(row, "status") or "active",
                created_at=created_at,
            )
        except (InvalidRecordError, DuplicateRecordError) as e:
            result.skip(row_num, str(e))
            continue

        result.imported += 1

    logger.info(
        f"Customer import: {result.imported} imported, {result.skipped} skipped of {result.total_rows}",
        extra={"imported": result.imported, "skipped": result.skipped},
    )
    return result


def _parse_quantity(value: str) -> int:
    try:
        quantity = int(value.strip())
    except ValueError as exc:
        raise InvalidRecordError(f"quantity must be an integer, got {value!r}") from exc
    return quantity


def import_sales_csv(store: EntityStore, content: str, now: Optional[datetime] = None) -> ImportResult:
    """
    Import sales from CSV text.

    Each row must name an existing customer. amount is always derived from
    quantity * unitPrice; an amount column, if present, is ignored.
    """

    created_at = now or utc_now()
    result = ImportResult()

    for row_num, row in enumerate(_read_rows(content), start=2):
        result.total_rows += 1

        is_valid, error = validate_row(row, SALE_REQUIRED_FIELDS)
        if not is_valid:
            result.skip(row_num, error)
            continue

        customer = store.find_customer_by_name(row["customerName"])
        if customer is None:
            result.skip(row_num, f"Unknown customer: {row['customerName'].strip()}")
            continue

        try:
            create_sale(
                store,
                customer_id=customer.customer_id,
                product=row["product"],
                quantity=_parse_quantity(row["quantity"]),
                unit_price=to_decimal(row["unitPrice"], name="unitPrice"),
                status=_optional(row, "status") or "completed",
                created_at=created_at,
            )
        except InvalidRecordError as e:
            result.skip(row_num, str(e))
            continue

        result.imported += 1

    logger.info(
        f"Sales import: {result.imported} imported, {result.skipped} skipped of {result.total_rows}",
        extra={"imported": result.imported, "skipped": result.skipped},
    )
    return result


__all__ = [
    "ImportResult",
    "validate_row",
    "import_customers_csv",
    "import_sales_csv",
]
