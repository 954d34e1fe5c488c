"""
Tests for `services/analytics_service.py`.

Covers contract rules:
- Empty inputs produce zero-valued aggregates.
- Monthly and daily revenue buckets preserve total revenue and are ordered by date.
- Product ranking is non-increasing by revenue, stable on ties and bounded by limit.
- Segment boundaries: 500 -> Low, 1000 -> Medium, 1000.01 -> High.
- Time-range filtering is inclusive on both ends.
- Malformed records are skipped, never aborting an aggregation.
- Functions are pure: same snapshot, same result, inputs untouched.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest

from services.analytics_service import (
    UNKNOWN_CUSTOMER_NAME,
    CountPoint,
    RevenuePoint,
    bucket_revenue_by_day,
    bucket_revenue_by_month,
    build_dashboard,
    build_time_range_report,
    compute_summary,
    count_by_status,
    count_customers_by_day,
    filter_by_date_range,
    filter_by_time_range,
    rank_top_products,
    recompute_customer_totals,
    resolve_customer_name,
    segment_customers,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# ============================================================================
# compute_summary
# ============================================================================

def test_compute_summary_empty_inputs_are_zero() -> None:
    """Verify empty collections give zero totals without dividing by zero."""

    summary = compute_summary([], [])

    assert summary.total_revenue == Decimal("0")
    assert summary.total_customers == 0
    assert summary.total_sales == 0
    assert summary.average_order_value == Decimal("0")


def test_compute_summary_totals_and_average(make_customer, make_sale) -> None:
    customers = [make_customer(), make_customer(), make_customer()]
    sales = [
        make_sale(quantity=1, unit_price=Decimal("100.00")),
        make_sale(quantity=2, unit_price=Decimal("100.00")),
        make_sale(quantity=1, unit_price=Decimal("50.00")),
    ]

    summary = compute_summary(customers, sales)

    assert summary.total_revenue == Decimal("350.00")
    assert summary.total_customers == 3
    assert summary.total_sales == 3
    assert summary.average_order_value == Decimal("116.67")


def test_compute_summary_sums_exactly(make_sale) -> None:
    """Verify many cent amounts sum without floating point drift."""

    sales = [make_sale(unit_price=Decimal("0.10")) for _ in range(1000)]

    summary = compute_summary([], sales)

    assert summary.total_revenue == Decimal("100.00")
    assert summary.average_order_value == Decimal("0.10")


def test_compute_summary_is_deterministic(make_customer, make_sale) -> None:
    customers = [make_customer(total_spent=Decimal("750"))]
    sales = [make_sale(unit_price=Decimal("19.99"), quantity=3), make_sale(unit_price=Decimal("5.01"))]

    assert compute_summary(customers, sales) == compute_summary(customers, sales)


def test_compute_summary_skips_malformed_sales(make_sale) -> None:
    """Verify non-numeric or undated sales are skipped and not counted."""

    good = make_sale(unit_price=Decimal("40.00"))
    bad_amount = SimpleNamespace(
        sale_id=uuid4(), quantity=1, amount="not-a-number", created_at=utc(2024, 1, 1),
        product="X", status="completed", customer_id=None,
    )
    bad_quantity = SimpleNamespace(
        sale_id=uuid4(), quantity="two", amount=Decimal("10"), created_at=utc(2024, 1, 1),
        product="X", status="completed", customer_id=None,
    )
    naive_date = SimpleNamespace(
        sale_id=uuid4(), quantity=1, amount=Decimal("10"), created_at=datetime(2024, 1, 1),
        product="X", status="completed", customer_id=None,
    )
    missing_date = SimpleNamespace(
        sale_id=uuid4(), quantity=1, amount=Decimal("10"), created_at=None,
        product="X", status="completed", customer_id=None,
    )

    summary = compute_summary([], [good, bad_amount, bad_quantity, naive_date, missing_date])

    assert summary.total_revenue == Decimal("40.00")
    assert summary.total_sales == 1
    assert summary.average_order_value == Decimal("40.00")


# ============================================================================
# Time bucketing
# ============================================================================

def test_bucket_revenue_by_month_scenario(make_sale) -> None:
    sales = [
        make_sale(unit_price=Decimal("100"), created_at=utc(2024, 1, 5)),
        make_sale(unit_price=Decimal("200"), created_at=utc(2024, 1, 20)),
        make_sale(unit_price=Decimal("50"), created_at=utc(2024, 2, 1)),
    ]

    assert bucket_revenue_by_month(sales) == [
        RevenuePoint("Jan 2024", Decimal("300")),
        RevenuePoint("Feb 2024", Decimal("50")),
    ]


def test_bucket_revenue_by_month_sorts_chronologically_not_by_input(make_sale) -> None:
    """Verify buckets follow calendar order across years regardless of insertion order."""

    sales = [
        make_sale(created_at=utc(2024, 3, 1)),
        make_sale(created_at=utc(2023, 12, 31)),
        make_sale(created_at=utc(2024, 1, 15)),
    ]

    labels = [point.label for point in bucket_revenue_by_month(sales)]

    assert labels == ["Dec 2023", "Jan 2024", "Mar 2024"]


def test_bucket_revenue_by_month_preserves_total(make_sale) -> None:
    sales = [
        make_sale(quantity=q, unit_price=Decimal(p), created_at=utc(2024, m, d))
        for q, p, m, d in [(1, "19.99", 1, 3), (3, "5.25", 1, 31), (2, "100", 4, 1), (5, "0.01", 7, 9)]
    ]

    buckets = bucket_revenue_by_month(sales)

    assert sum((p.revenue for p in buckets), Decimal("0")) == compute_summary([], sales).total_revenue


def test_bucket_revenue_by_day_sorts_by_date_not_label(make_sale) -> None:
    """Verify "Jan 10" follows "Jan 9" and "Feb 1" follows both (lexicographic order would not)."""

    sales = [
        make_sale(unit_price=Decimal("1"), created_at=utc(2024, 2, 1)),
        make_sale(unit_price=Decimal("2"), created_at=utc(2024, 1, 10)),
        make_sale(unit_price=Decimal("3"), created_at=utc(2024, 1, 9)),
        make_sale(unit_price=Decimal("4"), created_at=utc(2024, 1, 10, 23, 59)),
    ]

    assert bucket_revenue_by_day(sales) == [
        RevenuePoint("Jan 9", Decimal("3")),
        RevenuePoint("Jan 10", Decimal("6")),
        RevenuePoint("Feb 1", Decimal("1")),
    ]


def test_bucket_revenue_by_day_keeps_same_day_of_different_years_apart(make_sale) -> None:
    sales = [
        make_sale(created_at=utc(2024, 1, 5)),
        make_sale(created_at=utc(2023, 1, 5)),
    ]

    buckets = bucket_revenue_by_day(sales)

    assert [p.label for p in buckets] == ["Jan 5", "Jan 5"]
    assert len(buckets) == 2


def test_bucketing_empty_input_is_empty() -> None:
    assert bucket_revenue_by_month([]) == []
    assert bucket_revenue_by_day([]) == []
    assert count_customers_by_day([]) == []


def test_count_customers_by_day(make_customer) -> None:
    customers = [
        make_customer(created_at=utc(2024, 6, 2, 8)),
        make_customer(created_at=utc(2024, 6, 1)),
        make_customer(created_at=utc(2024, 6, 2, 20)),
    ]

    assert count_customers_by_day(customers) == [CountPoint("Jun 1", 1), CountPoint("Jun 2", 2)]


# ============================================================================
# Product ranking
# ============================================================================

def test_rank_top_products_aggregates_and_sorts(make_sale) -> None:
    sales = [
        make_sale(product="Webcam HD", quantity=1, unit_price=Decimal("99.99")),
        make_sale(product="Monitor 4K", quantity=2, unit_price=Decimal("399.99")),
        make_sale(product="Webcam HD", quantity=3, unit_price=Decimal("99.99")),
        make_sale(product="Power Bank", quantity=1, unit_price=Decimal("49.99")),
    ]

    ranked = rank_top_products(sales, limit=5)

    assert [p.product for p in ranked] == ["Monitor 4K", "Webcam HD", "Power Bank"]
    webcam = ranked[1]
    assert webcam.revenue == Decimal("399.96")
    assert webcam.quantity == 4
    assert webcam.orders == 2
    assert webcam.average_order_value == Decimal("199.98")


def test_rank_top_products_is_non_increasing_and_bounded(make_sale) -> None:
    sales = [
        make_sale(product=f"Product {i}", unit_price=Decimal(i * 7 % 11 + 1))
        for i in range(12)
    ]

    ranked = rank_top_products(sales, limit=5)

    assert len(ranked) <= 5
    revenues = [p.revenue for p in ranked]
    assert revenues == sorted(revenues, reverse=True)


def test_rank_top_products_ties_keep_first_seen_order(make_sale) -> None:
    sales = [
        make_sale(product="Bravo", unit_price=Decimal("10")),
        make_sale(product="Alpha", unit_price=Decimal("10")),
        make_sale(product="Charlie", unit_price=Decimal("10")),
        make_sale(product="Delta", unit_price=Decimal("20")),
    ]

    ranked = rank_top_products(sales, limit=10)

    assert [p.product for p in ranked] == ["Delta", "Bravo", "Alpha", "Charlie"]


def test_rank_top_products_limit_zero_and_negative(make_sale) -> None:
    sales = [make_sale()]

    assert rank_top_products(sales, limit=0) == []
    with pytest.raises(ValueError):
        rank_top_products(sales, limit=-1)


# ============================================================================
# Segmentation
# ============================================================================

@pytest.mark.parametrize(
    "total_spent, expected",
    [
        (Decimal("0"), "Low Value"),
        (Decimal("500"), "Low Value"),
        (Decimal("500.01"), "Medium Value"),
        (Decimal("1000"), "Medium Value"),
        (Decimal("1000.01"), "High Value"),
    ],
)
def test_segment_customers_boundaries(make_customer, total_spent: Decimal, expected: str) -> None:
    counts = segment_customers([make_customer(total_spent=total_spent)])

    assert counts[expected] == 1
    assert sum(counts.values()) == 1


def test_segment_customers_scenario() -> None:
    customers = [SimpleNamespace(total_spent=v) for v in (500, 1000, 1001)]

    assert segment_customers(customers) == {"High Value": 1, "Medium Value": 1, "Low Value": 1}


def test_segment_customers_empty_has_all_keys() -> None:
    assert segment_customers([]) == {"High Value": 0, "Medium Value": 0, "Low Value": 0}


def test_segment_customers_skips_non_numeric_total() -> None:
    customers = [SimpleNamespace(customer_id=uuid4(), total_spent="lots"), SimpleNamespace(total_spent=1200)]

    assert segment_customers(customers) == {"High Value": 1, "Medium Value": 0, "Low Value": 0}


# ============================================================================
# Status counts
# ============================================================================

def test_count_by_status(make_sale) -> None:
    sales = [make_sale(status="pending"), make_sale(), make_sale(), make_sale(status="pending")]

    assert count_by_status(sales) == {"pending": 2, "completed": 2}
    assert count_by_status([]) == {}


# ============================================================================
# Time filtering
# ============================================================================

def test_filter_by_time_range_days_zero_keeps_only_now(make_sale, now) -> None:
    at_now = make_sale(created_at=now)
    just_before = make_sale(created_at=now - timedelta(seconds=1))

    assert filter_by_time_range([at_now, just_before], 0, now=now) == [at_now]


def test_filter_by_time_range_oldest_age_returns_everything(make_sale, now) -> None:
    sales = [make_sale(created_at=now - timedelta(days=d)) for d in (0, 3, 29, 45)]

    assert filter_by_time_range(sales, 45, now=now) == sales
    assert filter_by_time_range(sales, 44, now=now) == sales[:3]


def test_filter_by_time_range_excludes_future_records(make_sale, now) -> None:
    future = make_sale(created_at=now + timedelta(minutes=1))

    assert filter_by_time_range([future], 30, now=now) == []


def test_filter_by_time_range_window_past_year_one_keeps_everything(make_sale, now) -> None:
    """Verify a window reaching back before datetime.min covers all records up to now."""

    ancient = make_sale(created_at=utc(1, 1, 1))
    recent = make_sale(created_at=now)

    assert filter_by_time_range([ancient, recent], 1_000_000, now=now) == [ancient, recent]


@pytest.mark.parametrize("days", [-1, 1.5, "30", True])
def test_filter_by_time_range_rejects_invalid_days(days, now) -> None:
    with pytest.raises(ValueError):
        filter_by_time_range([], days, now=now)


def test_filter_by_date_range_is_inclusive(make_customer) -> None:
    start, end = utc(2024, 1, 1), utc(2024, 1, 31)
    on_start = make_customer(created_at=start)
    on_end = make_customer(created_at=end)
    outside = make_customer(created_at=utc(2024, 2, 1))

    assert filter_by_date_range([on_start, outside, on_end], start, end) == [on_start, on_end]


def test_filter_by_date_range_rejects_reversed_range() -> None:
    with pytest.raises(ValueError):
        filter_by_date_range([], utc(2024, 2, 1), utc(2024, 1, 1))


# ============================================================================
# Customer joins
# ============================================================================

def test_resolve_customer_name_prefers_live_name(make_customer, make_sale) -> None:
    customer = make_customer(name="Renamed Corp")
    sale = make_sale(customer_id=customer.customer_id, customer_name="Old Name")

    assert resolve_customer_name(sale, {customer.customer_id: customer}) == "Renamed Corp"


def test_resolve_customer_name_falls_back_for_deleted_customer(make_sale) -> None:
    sale = make_sale(customer_id=uuid4(), customer_name="Old Name")
    nameless = make_sale(customer_id=uuid4(), customer_name="  ")

    assert resolve_customer_name(sale, {}) == "Old Name"
    assert resolve_customer_name(nameless, {}) == UNKNOWN_CUSTOMER_NAME


def test_recompute_customer_totals_ignores_orphans(make_customer, make_sale) -> None:
    buyer = make_customer(total_spent=Decimal("999"))
    idle = make_customer()
    sales = [
        make_sale(customer_id=buyer.customer_id, quantity=2, unit_price=Decimal("25.00")),
        make_sale(customer_id=buyer.customer_id, unit_price=Decimal("10.00")),
        make_sale(customer_id=uuid4(), unit_price=Decimal("500.00")),
    ]

    totals = recompute_customer_totals([buyer, idle], sales)

    assert totals[buyer.customer_id].total_spent == Decimal("60.00")
    assert totals[buyer.customer_id].total_orders == 2
    assert totals[idle.customer_id].total_spent == Decimal("0")
    assert totals[idle.customer_id].total_orders == 0
    # Stored value is untouched
    assert buyer.total_spent == Decimal("999")


# ============================================================================
# Screen-level reports
# ============================================================================

def test_build_dashboard(make_customer, make_sale) -> None:
    customers = [make_customer(total_spent=Decimal(v)) for v in ("100", "700", "1500")]
    sales = [
        make_sale(product="Tablet Air", unit_price=Decimal("599.99"), created_at=utc(2024, 5, 2)),
        make_sale(product="Power Bank", unit_price=Decimal("49.99"), created_at=utc(2024, 4, 30)),
    ]

    dashboard = build_dashboard(customers, sales)

    assert dashboard.summary.total_revenue == Decimal("649.98")
    assert dashboard.summary.total_customers == 3
    assert [p.label for p in dashboard.monthly_revenue] == ["Apr 2024", "May 2024"]
    assert dashboard.top_products[0].product == "Tablet Air"
    assert dashboard.customer_segments == {"High Value": 1, "Medium Value": 1, "Low Value": 1}


def test_build_dashboard_does_not_mutate_inputs(make_customer, make_sale) -> None:
    customers = [make_customer(), make_customer(total_spent=Decimal("2000"))]
    sales = [make_sale(), make_sale(product="Gaming Mouse")]
    customers_before = list(customers)
    sales_before = list(sales)

    first = build_dashboard(customers, sales)
    second = build_dashboard(customers, sales)

    assert first == second
    assert customers == customers_before
    assert sales == sales_before


def test_build_time_range_report_filters_both_collections(make_customer, make_sale, now) -> None:
    recent_customer = make_customer(created_at=now - timedelta(days=2))
    old_customer = make_customer(created_at=now - timedelta(days=60))
    sales = [
        make_sale(unit_price=Decimal("30"), created_at=now - timedelta(days=1)),
        make_sale(unit_price=Decimal("70"), created_at=now - timedelta(days=6), status="pending"),
        make_sale(unit_price=Decimal("500"), created_at=now - timedelta(days=8)),
    ]

    report = build_time_range_report([recent_customer, old_customer], sales, 7, now=now)

    assert report.days == 7
    assert report.start == now - timedelta(days=7)
    assert report.end == now
    assert report.summary.total_customers == 1
    assert report.summary.total_sales == 2
    assert report.summary.total_revenue == Decimal("100")
    assert report.summary.average_order_value == Decimal("50.00")
    assert [p.label for p in report.daily_revenue] == ["Jun 9", "Jun 14"]
    assert report.customer_acquisition == [CountPoint("Jun 13", 1)]
    assert report.sales_by_status == {"completed": 1, "pending": 1}


def test_build_time_range_report_empty(now) -> None:
    report = build_time_range_report([], [], 30, now=now)

    assert report.summary.total_revenue == Decimal("0")
    assert report.daily_revenue == []
    assert report.top_products == []
    assert report.sales_by_status == {}


def test_build_time_range_report_huge_window(make_sale, now) -> None:
    sale = make_sale(unit_price=Decimal("12.50"), created_at=now - timedelta(days=4000))

    report = build_time_range_report([], [sale], 1_000_000, now=now)

    assert report.start == datetime.min.replace(tzinfo=timezone.utc)
    assert report.end == now
    assert report.summary.total_revenue == Decimal("12.50")
    assert report.summary.total_sales == 1
