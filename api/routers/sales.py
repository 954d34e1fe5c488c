"""
Sales API Endpoints.

CRUD for sales, free-text search, and CSV export. Customer names in
responses are resolved against current customers; the name stored on a sale
is only a fallback for customers that have since been deleted.
"""

import logging
from typing import List, Mapping, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from api.dependencies import get_store
from api.models import MessageResponse, SaleCreate, SaleResponse, SaleUpdate
from domain.customer import Customer
from domain.errors import InvalidRecordError
from domain.sale import Sale
from repositories.store import EntityStore, RecordNotFoundError
from services import sales_service
from services.analytics_service import resolve_customer_name
from services.csv_export_service import generate_sales_csv
from services.search_service import search_sales

logger = logging.getLogger(__name__)

router = APIRouter()


def to_sale_response(sale: Sale, customers_by_id: Mapping[UUID, Customer]) -> SaleResponse:
    return SaleResponse(
        sale_id=sale.sale_id,
        customer_id=sale.customer_id,
        customer_name=resolve_customer_name(sale, customers_by_id),
        product=sale.product,
        quantity=sale.quantity,
        unit_price=sale.unit_price,
        amount=sale.amount,
        status=sale.status.value,
        created_at=sale.created_at,
    )


def _single_customer_map(store: EntityStore, sale: Sale) -> dict:
    customer = store.get_customer(sale.customer_id) if sale.customer_id else None
    return {customer.customer_id: customer} if customer else {}


@router.get(
    "/sales",
    response_model=List[SaleResponse],
    summary="List Sales",
    description="All sales, newest first. `search` matches customer name, product or status."
)
def list_sales(
    search: Optional[str] = Query(None, description="Case-insensitive text to search for"),
    store: EntityStore = Depends(get_store),
):
    try:
        snapshot = store.snapshot()
        customers_by_id = snapshot.customers_by_id()
        sales = search_sales(snapshot.sales, search, customers_by_id)
        return [to_sale_response(s, customers_by_id) for s in sales]
    except Exception as e:
        logger.exception("Failed to list sales")
        raise HTTPException(status_code=500, detail=f"Failed to list sales: {str(e)}")


@router.get(
    "/sales/export",
    summary="Export Sales CSV",
    description="Download all sales as a CSV file.",
    response_class=Response
)
def export_sales_csv(store: EntityStore = Depends(get_store)):
    """
    **Response:**
    CSV file download with filename: `sales-data.csv`
    """
    try:
        snapshot = store.snapshot()
        csv_content = generate_sales_csv(snapshot.sales, snapshot.customers_by_id())
    except Exception as e:
        logger.exception("Failed to export sales")
        raise HTTPException(status_code=500, detail=f"Failed to generate CSV: {str(e)}")

    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=sales-data.csv"}
    )


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=201,
    summary="Record Sale",
    description="Record a sale for an existing customer. amount = quantity * unit_price."
)
def add_sale(request: SaleCreate, store: EntityStore = Depends(get_store)):
    try:
        sale = sales_service.create_sale(store, **request.model_dump())
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return to_sale_response(sale, _single_customer_map(store, sale))


@router.get("/sales/{sale_id}", response_model=SaleResponse, summary="Get Sale")
def get_sale(sale_id: UUID, store: EntityStore = Depends(get_store)):
    sale = store.get_sale(sale_id)
    if sale is None:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    return to_sale_response(sale, _single_customer_map(store, sale))


@router.put(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    summary="Update Sale",
    description="Partial update. amount is recomputed from quantity and unit_price."
)
def update_sale(sale_id: UUID, request: SaleUpdate, store: EntityStore = Depends(get_store)):
    changes = request.model_dump(exclude_unset=True)
    try:
        sale = sales_service.update_sale(store, sale_id, **changes)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return to_sale_response(sale, _single_customer_map(store, sale))


@router.delete("/sales/{sale_id}", response_model=MessageResponse, summary="Delete Sale")
def delete_sale(sale_id: UUID, store: EntityStore = Depends(get_store)):
    try:
        store.delete_sale(sale_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(message="Sale deleted successfully")
