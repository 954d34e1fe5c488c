"""
Analytics API Endpoints.

Each request takes one store snapshot and runs the aggregation functions in
services.analytics_service over it.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_store
from api.models import (
    CountPointResponse,
    CustomerTotalsResponse,
    DashboardResponse,
    ProductPerformanceResponse,
    RevenuePointResponse,
    SummaryResponse,
    TimeRangeReportResponse,
)
from repositories.store import EntityStore
from services.analytics_service import (
    ProductPerformance,
    RevenuePoint,
    SalesSummary,
    TIME_RANGE_CHOICES,
    build_dashboard,
    build_time_range_report,
    recompute_customer_totals,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _summary(summary: SalesSummary) -> SummaryResponse:
    return SummaryResponse(
        total_revenue=summary.total_revenue,
        total_customers=summary.total_customers,
        total_sales=summary.total_sales,
        average_order_value=summary.average_order_value,
    )


def _revenue_series(points: List[RevenuePoint]) -> List[RevenuePointResponse]:
    return [RevenuePointResponse(label=p.label, revenue=p.revenue) for p in points]


def _products(products: List[ProductPerformance]) -> List[ProductPerformanceResponse]:
    return [
        ProductPerformanceResponse(
            product=p.product,
            revenue=p.revenue,
            quantity=p.quantity,
            orders=p.orders,
            average_order_value=p.average_order_value,
        )
        for p in products
    ]


@router.get(
    "/analytics",
    response_model=DashboardResponse,
    summary="Dashboard Analytics",
    description="Totals, monthly revenue, top 5 products and customer segments over all data."
)
def get_dashboard_analytics(store: EntityStore = Depends(get_store)):
    try:
        snapshot = store.snapshot()
        dashboard = build_dashboard(snapshot.customers, snapshot.sales)
    except Exception as e:
        logger.exception("Failed to compute dashboard analytics")
        raise HTTPException(status_code=500, detail=f"Failed to compute analytics: {str(e)}")

    return DashboardResponse(
        summary=_summary(dashboard.summary),
        monthly_revenue=_revenue_series(dashboard.monthly_revenue),
        top_products=_products(dashboard.top_products),
        customer_segments=dashboard.customer_segments,
    )


@router.get(
    "/analytics/report",
    response_model=TimeRangeReportResponse,
    summary="Time Range Report",
    description=(
        "Analytics over the last `days` days. The dashboard offers "
        + ", ".join(str(d) for d in TIME_RANGE_CHOICES) + "."
    ),
)
def get_time_range_report(
    days: int = Query(30, ge=0, le=3650, description="Size of the window in days"),
    store: EntityStore = Depends(get_store),
):
    """
    **Example usage:**
    - Last 30 days: `GET /api/v1/analytics/report`
    - Last year: `GET /api/v1/analytics/report?days=365`
    """
    try:
        snapshot = store.snapshot()
        report = build_time_range_report(snapshot.customers, snapshot.sales, days)
    except Exception as e:
        logger.exception("Failed to compute time range report")
        raise HTTPException(status_code=500, detail=f"Failed to compute report: {str(e)}")

    return TimeRangeReportResponse(
        days=report.days,
        start=report.start,
        end=report.end,
        summary=_summary(report.summary),
        daily_revenue=_revenue_series(report.daily_revenue),
        top_products=_products(report.top_products),
        customer_acquisition=[
            CountPointResponse(label=p.label, count=p.count) for p in report.customer_acquisition
        ],
        sales_by_status=report.sales_by_status,
    )


@router.get(
    "/analytics/customer-totals",
    response_model=List[CustomerTotalsResponse],
    summary="Customer Totals",
    description="Stored customer totals alongside totals recomputed from sales. Nothing is written back."
)
def get_customer_totals(store: EntityStore = Depends(get_store)):
    snapshot = store.snapshot()
    computed = recompute_customer_totals(snapshot.customers, snapshot.sales)

    return [
        CustomerTotalsResponse(
            customer_id=c.customer_id,
            name=c.name,
            stored_total_spent=c.total_spent,
            stored_total_orders=c.total_orders,
            computed_total_spent=computed[c.customer_id].total_spent,
            computed_total_orders=computed[c.customer_id].total_orders,
        )
        for c in snapshot.customers
    ]
