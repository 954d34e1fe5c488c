"""
CSV export service for sales.

Generates the sales CSV download, one row per sale, with the customer name
resolved against the current customer list.

Security:
- CSV Injection Prevention: Sanitizes text fields to prevent formula execution
- Security Logging: Logs when dangerous characters are stripped
"""

from __future__ import annotations

import csv
import logging
from io import StringIO
from typing import Iterable, Mapping
from uuid import UUID

from domain.customer import Customer
from domain.sale import Sale
from services.analytics_service import resolve_customer_name

logger = logging.getLogger(__name__)

SALES_CSV_HEADER = [
    "Sale ID",
    "Customer Name",
    "Product",
    "Quantity",
    "Unit Price",
    "Amount",
    "Status",
    "Date",
]


def sanitize_csv_field(value: str | None, field_name: str = "unknown") -> str:
    """
    Sanitize field to prevent CSV injection attacks with security logging.

    Strips leading characters that can trigger formula execution in Excel/Sheets:
    =, +, -, @, tab, carriage return

    If dangerous characters are found and stripped, a warning is logged for
    security monitoring.

    Example:
        sanitize_csv_field("=1+1", "product")
        # Returns "1+1" and logs warning about stripped "=" character

        sanitize_csv_field("Monitor 4K", "product")
        # Returns "Monitor 4K" (unchanged, no logging)
    """
    if value is None or value == "":
        return ""

    text = str(value).strip()
    original_text = text
    dangerous_chars = {'=', '+', '-', '@', '\t', '\r'}

    # Strip dangerous leading characters
    stripped_chars = []
    while text and text[0] in dangerous_chars:
        stripped_chars.append(text[0])
        text = text[1:]

    if stripped_chars:
        logger.warning(
            f"CSV injection character(s) stripped from field '{field_name}'",
            extra={
                "field_name": field_name,
                "stripped_characters": "".join(stripped_chars),
                "original_value": original_text[:100],
                "sanitized_value": text[:100],
                "modification_type": "csv_injection_prevention"
            }
        )

    return text


def generate_sales_csv(sales: Iterable[Sale], customers_by_id: Mapping[UUID, Customer]) -> str:
    """
    Generate CSV content for the given sales.

    Args:
        sales: Sales to export, in the order they should appear
        customers_by_id: Current customers, used to resolve display names

    Returns:
        CSV content as a string (header row included, even with no sales)

    Example:
        snapshot = store.snapshot()
        csv_content = generate_sales_csv(snapshot.sales, snapshot.customers_by_id())
        return Response(content=csv_content, media_type="text/csv")
    """
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(SALES_CSV_HEADER)

    for sale in sales:
        writer.writerow([
            str(sale.sale_id),
            sanitize_csv_field(resolve_customer_name(sale, customers_by_id), "customer_name"),
            sanitize_csv_field(sale.product, "product"),
            sale.quantity,
            str(sale.unit_price),
            str(sale.amount),
            sale.status.value,
            sale.created_at.isoformat(),
        ])

    return output.getvalue()


__all__ = [
    "SALES_CSV_HEADER",
    "generate_sales_csv",
    "sanitize_csv_field",
]
