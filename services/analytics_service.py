"""
Analytics service: aggregation over customers and sales.

Every function here is pure. It reads the collections it is given and
returns new values. It never mutates its inputs, performs no I/O and keeps no
state between calls, so the same snapshot always produces the same result.

Record policy:
- Empty collections produce zero-valued aggregates.
- Malformed records (non-numeric quantity/unit_price/amount, missing or naive
  created_at) are skipped and logged; they never abort an aggregation and are
  not counted anywhere.

Precision:
- Revenue sums are exact Decimal sums of Sale.amount.
- Averages are rounded to cents (ROUND_HALF_UP) once, when produced.

Time:
- All bucketing happens on the UTC calendar.
- Month buckets are labelled "Jan 2024"; day buckets "Jan 5". Buckets are keyed
  and sorted by the actual date, never by the label text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple, TypeVar
from uuid import UUID

from domain.customer import Customer
from domain.errors import InvalidRecordError
from domain.money import ZERO, safe_average, to_decimal
from domain.sale import Sale
from domain.segment import CustomerSegment
from domain.time import require_utc_timestamp, utc_now

logger = logging.getLogger(__name__)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

UNKNOWN_CUSTOMER_NAME = "Unknown Customer"
DASHBOARD_TOP_PRODUCTS = 5
REPORT_TOP_PRODUCTS = 10
TIME_RANGE_CHOICES = (7, 30, 90, 365)
EARLIEST_UTC = datetime.min.replace(tzinfo=timezone.utc)

T = TypeVar("T")


# ============================================================================
# Result types
# ============================================================================

class RevenuePoint(NamedTuple):
    """One bucket of a revenue time series."""
    label: str
    revenue: Decimal


class CountPoint(NamedTuple):
    """One bucket of a count time series."""
    label: str
    count: int


@dataclass(frozen=True, slots=True)
class SalesSummary:
    total_revenue: Decimal
    total_customers: int
    total_sales: int
    average_order_value: Decimal


@dataclass(frozen=True, slots=True)
class ProductPerformance:
    product: str
    revenue: Decimal
    quantity: int
    orders: int
    average_order_value: Decimal


@dataclass(frozen=True, slots=True)
class CustomerTotals:
    """Spend and order count for one customer, derived from sales."""
    total_spent: Decimal
    total_orders: int


@dataclass(frozen=True, slots=True)
class DashboardAnalytics:
    """Everything the dashboard screen shows, computed over the full snapshot."""
    summary: SalesSummary
    monthly_revenue: List[RevenuePoint]
    top_products: List[ProductPerformance]
    customer_segments: Dict[str, int]


@dataclass(frozen=True, slots=True)
class TimeRangeReport:
    """
    Analytics over the last `days` days.

    summary.total_customers counts customers created inside the range (new
    customers), not the whole customer base.
    """
    days: int
    start: datetime
    end: datetime
    summary: SalesSummary
    daily_revenue: List[RevenuePoint]
    top_products: List[ProductPerformance]
    customer_acquisition: List[CountPoint]
    sales_by_status: Dict[str, int] = field(default_factory=dict)


# ============================================================================
# Record guards
# ============================================================================

def _describe(record: Any) -> str:
    for attr in ("sale_id", "customer_id", "id"):
        value = getattr(record, attr, None)
        if value is not None:
            return str(value)
    return repr(record)[:80]


def _log_skipped(kind: str, record: Any, exc: Exception) -> None:
    logger.warning(
        f"Skipping malformed {kind} record during aggregation: {exc}",
        extra={
            "record_kind": kind,
            "record_ref": _describe(record),
            "reason": str(exc),
        },
    )


def _require_quantity(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidRecordError(f"quantity must be an integer >= 1, got {value!r}")
    return value


def _usable_sales(sales: Iterable[Any]) -> List[Tuple[Any, Decimal]]:
    """Pair each well-formed sale with its amount, dropping malformed ones."""

    usable: List[Tuple[Any, Decimal]] = []
    for sale in sales:
        try:
            _require_quantity(sale.quantity)
            amount = to_decimal(sale.amount, name="amount")
            require_utc_timestamp("created_at", sale.created_at)
        except (AttributeError, TypeError, InvalidRecordError) as exc:
            _log_skipped("sale", sale, exc)
            continue
        usable.append((sale, amount))
    return usable


def _usable_timestamped(records: Iterable[T], kind: str) -> List[T]:
    usable: List[T] = []
    for record in records:
        try:
            require_utc_timestamp("created_at", getattr(record, "created_at", None))
        except InvalidRecordError as exc:
            _log_skipped(kind, record, exc)
            continue
        usable.append(record)
    return usable


def _status_key(status: Any) -> str:
    return str(getattr(status, "value", status))


# ============================================================================
# Core aggregations
# ============================================================================

def compute_summary(customers: Iterable[Customer], sales: Iterable[Sale]) -> SalesSummary:
    """
    Totals over a snapshot.

    average_order_value is total_revenue / total_sales, or 0 with no sales.
    """

    usable = _usable_sales(sales)
    total_revenue = sum((amount for _, amount in usable), ZERO)
    total_sales = len(usable)

    return SalesSummary(
        total_revenue=total_revenue,
        total_customers=len(list(customers)),
        total_sales=total_sales,
        average_order_value=safe_average(total_revenue, total_sales),
    )


def bucket_revenue_by_month(sales: Iterable[Sale]) -> List[RevenuePoint]:
    """
    Revenue per calendar month, oldest month first.

    Example:
        [("Jan 2024", Decimal("300")), ("Feb 2024", Decimal("50"))]
    """

    buckets: Dict[Tuple[int, int], Decimal] = {}
    for sale, amount in _usable_sales(sales):
        key = (sale.created_at.year, sale.created_at.month)
        buckets[key] = buckets.get(key, ZERO) + amount

    return [
        RevenuePoint(f"{MONTH_ABBREVIATIONS[month - 1]} {year}", revenue)
        for (year, month), revenue in sorted(buckets.items())
    ]


def _day_label(day: date) -> str:
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}"


def bucket_revenue_by_day(sales: Iterable[Sale]) -> List[RevenuePoint]:
    """
    Revenue per calendar day, oldest day first.

    Buckets are keyed by the full date, so the same day in two different years
    stays two buckets even though both carry the same label.
    """

    buckets: Dict[date, Decimal] = {}
    for sale, amount in _usable_sales(sales):
        key = sale.created_at.date()
        buckets[key] = buckets.get(key, ZERO) + amount

    return [RevenuePoint(_day_label(day), revenue) for day, revenue in sorted(buckets.items())]


def count_customers_by_day(customers: Iterable[Customer]) -> List[CountPoint]:
    """New customers per calendar day, oldest day first."""

    buckets: Dict[date, int] = {}
    for customer in _usable_timestamped(customers, "customer"):
        key = customer.created_at.date()
        buckets[key] = buckets.get(key, 0) + 1

    return [CountPoint(_day_label(day), count) for day, count in sorted(buckets.items())]


def rank_top_products(sales: Iterable[Sale], limit: int = DASHBOARD_TOP_PRODUCTS) -> List[ProductPerformance]:
    """
    Product performance ranked by revenue, highest first.

    Products with equal revenue keep the order in which they were first seen.
    At most `limit` entries are returned.
    """

    if limit < 0:
        raise ValueError("limit must be >= 0")

    # product -> [revenue, quantity, orders]; dict keeps first-seen order
    totals: Dict[str, List[Any]] = {}
    for sale, amount in _usable_sales(sales):
        entry = totals.setdefault(sale.product, [ZERO, 0, 0])
        entry[0] += amount
        entry[1] += sale.quantity
        entry[2] += 1

    ranked = [
        ProductPerformance(
            product=product,
            revenue=revenue,
            quantity=quantity,
            orders=orders,
            average_order_value=safe_average(revenue, orders),
        )
        for product, (revenue, quantity, orders) in totals.items()
    ]
    # sorted() is stable, including with reverse=True
    ranked = sorted(ranked, key=lambda p: p.revenue, reverse=True)
    return ranked[:limit]


def segment_customers(customers: Iterable[Customer]) -> Dict[str, int]:
    """
    Count customers per value segment, keyed by segment name.

    All three segments are always present.
    """

    counts: Dict[str, int] = {segment.value: 0 for segment in CustomerSegment}
    for customer in customers:
        try:
            total_spent = to_decimal(customer.total_spent, name="total_spent")
        except (AttributeError, InvalidRecordError) as exc:
            _log_skipped("customer", customer, exc)
            continue
        counts[CustomerSegment.for_total_spent(total_spent).value] += 1
    return counts


def count_by_status(sales: Iterable[Sale]) -> Dict[str, int]:
    """Number of sales per status, in first-seen order."""

    counts: Dict[str, int] = {}
    for sale, _ in _usable_sales(sales):
        key = _status_key(sale.status)
        counts[key] = counts.get(key, 0) + 1
    return counts


# ============================================================================
# Time filtering
# ============================================================================

def filter_by_date_range(records: Iterable[T], start: datetime, end: datetime) -> List[T]:
    """Records with start <= created_at <= end, in input order."""

    require_utc_timestamp("start", start)
    require_utc_timestamp("end", end)
    if end < start:
        raise ValueError("end must be >= start")

    return [
        record
        for record in _usable_timestamped(records, "record")
        if start <= record.created_at <= end
    ]


def _window_start(end: datetime, days: int) -> datetime:
    """end - days, clamped to the earliest representable UTC instant."""

    try:
        return end - timedelta(days=days)
    except OverflowError:
        return EARLIEST_UTC


def filter_by_time_range(records: Iterable[T], days: int, now: Optional[datetime] = None) -> List[T]:
    """
    Records created within the last `days` days.

    The window is [now - days, now], both ends inclusive. With days=0 only
    records stamped exactly `now` survive. A window reaching back past year 1
    covers everything up to `now`.
    """

    if isinstance(days, bool) or not isinstance(days, int):
        raise ValueError(f"days must be an integer, got {days!r}")
    if days < 0:
        raise ValueError("days must be >= 0")

    end = now if now is not None else utc_now()
    return filter_by_date_range(records, _window_start(end, days), end)


# ============================================================================
# Customer joins
# ============================================================================

def resolve_customer_name(sale: Sale, customers_by_id: Mapping[UUID, Customer]) -> str:
    """
    Display name for a sale's customer.

    Live name when the customer still exists, else the name captured on the
    sale, else UNKNOWN_CUSTOMER_NAME.
    """

    customer = customers_by_id.get(sale.customer_id) if sale.customer_id is not None else None
    if customer is not None:
        return customer.name
    if sale.customer_name and sale.customer_name.strip():
        return sale.customer_name
    return UNKNOWN_CUSTOMER_NAME


def recompute_customer_totals(
    customers: Iterable[Customer],
    sales: Iterable[Sale],
) -> Dict[UUID, CustomerTotals]:
    """
    Spend and order count per customer, derived from sales.

    Every customer appears, with zero totals when they have no sales. Sales
    whose customer no longer exists are ignored. Stored Customer.total_spent
    values are neither read nor written.
    """

    running: Dict[UUID, List[Any]] = {c.customer_id: [ZERO, 0] for c in customers}
    orphaned = 0
    for sale, amount in _usable_sales(sales):
        entry = running.get(sale.customer_id)
        if entry is None:
            orphaned += 1
            continue
        entry[0] += amount
        entry[1] += 1

    if orphaned:
        logger.info(f"{orphaned} sale(s) reference customers that no longer exist")

    return {
        customer_id: CustomerTotals(total_spent=spent, total_orders=orders)
        for customer_id, (spent, orders) in running.items()
    }


# ============================================================================
# Screen-level reports
# ============================================================================

def build_dashboard(customers: Iterable[Customer], sales: Iterable[Sale]) -> DashboardAnalytics:
    """Summary, monthly revenue, top 5 products and segments over the whole snapshot."""

    customers = list(customers)
    sales = list(sales)
    return DashboardAnalytics(
        summary=compute_summary(customers, sales),
        monthly_revenue=bucket_revenue_by_month(sales),
        top_products=rank_top_products(sales, DASHBOARD_TOP_PRODUCTS),
        customer_segments=segment_customers(customers),
    )


def build_time_range_report(
    customers: Iterable[Customer],
    sales: Iterable[Sale],
    days: int,
    now: Optional[datetime] = None,
) -> TimeRangeReport:
    """
    Analytics restricted to records created in the last `days` days.

    Both collections are filtered with the same window before aggregation.
    """

    end = now if now is not None else utc_now()
    recent_customers = filter_by_time_range(customers, days, end)
    recent_sales = filter_by_time_range(sales, days, end)

    return TimeRangeReport(
        days=days,
        start=_window_start(end, days),
        end=end,
        summary=compute_summary(recent_customers, recent_sales),
        daily_revenue=bucket_revenue_by_day(recent_sales),
        top_products=rank_top_products(recent_sales, REPORT_TOP_PRODUCTS),
        customer_acquisition=count_customers_by_day(recent_customers),
        sales_by_status=count_by_status(recent_sales),
    )


__all__ = [
    "RevenuePoint",
    "CountPoint",
    "SalesSummary",
    "ProductPerformance",
    "CustomerTotals",
    "DashboardAnalytics",
    "TimeRangeReport",
    "UNKNOWN_CUSTOMER_NAME",
    "TIME_RANGE_CHOICES",
    "compute_summary",
    "bucket_revenue_by_month",
    "bucket_revenue_by_day",
    "count_customers_by_day",
    "rank_top_products",
    "segment_customers",
    "count_by_status",
    "filter_by_date_range",
    "filter_by_time_range",
    "resolve_customer_name",
    "recompute_customer_totals",
    "build_dashboard",
    "build_time_range_report",
]
