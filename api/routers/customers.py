"""
Customers API Endpoints.

CRUD for customer accounts, with free-text search on the listing.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_store
from api.models import CustomerCreate, CustomerResponse, CustomerUpdate, MessageResponse
from domain.customer import Customer
from domain.errors import InvalidRecordError
from domain.segment import CustomerSegment
from repositories.store import DuplicateRecordError, EntityStore, RecordNotFoundError
from services.sales_service import create_customer
from services.search_service import search_customers

logger = logging.getLogger(__name__)

router = APIRouter()


def to_customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        customer_id=customer.customer_id,
        name=customer.name,
        email=customer.email,
        phone=customer.phone,
        company=customer.company,
        city=customer.city,
        total_spent=customer.total_spent,
        total_orders=customer.total_orders,
        status=customer.status.value,
        segment=CustomerSegment.for_total_spent(customer.total_spent).value,
        created_at=customer.created_at,
    )


@router.get(
    "/customers",
    response_model=List[CustomerResponse],
    summary="List Customers",
    description="All customers, newest first. `search` matches name, email or company."
)
def list_customers(
    search: Optional[str] = Query(None, description="Case-insensitive text to search for"),
    store: EntityStore = Depends(get_store),
):
    try:
        customers = search_customers(store.list_customers(), search)
        return [to_customer_response(c) for c in customers]
    except Exception as e:
        logger.exception("Failed to list customers")
        raise HTTPException(status_code=500, detail=f"Failed to list customers: {str(e)}")


@router.post(
    "/customers",
    response_model=CustomerResponse,
    status_code=201,
    summary="Create Customer"
)
def add_customer(request: CustomerCreate, store: EntityStore = Depends(get_store)):
    try:
        customer = create_customer(store, **request.model_dump())
        return to_customer_response(customer)
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/customers/{customer_id}", response_model=CustomerResponse, summary="Get Customer")
def get_customer(customer_id: UUID, store: EntityStore = Depends(get_store)):
    customer = store.get_customer(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail=f"Customer not found: {customer_id}")
    return to_customer_response(customer)


@router.put(
    "/customers/{customer_id}",
    response_model=CustomerResponse,
    summary="Update Customer",
    description="Partial update: only the fields present in the body are changed."
)
def update_customer(customer_id: UUID, request: CustomerUpdate, store: EntityStore = Depends(get_store)):
    changes = request.model_dump(exclude_unset=True)
    try:
        customer = store.update_customer(customer_id, **changes)
        return to_customer_response(customer)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidRecordError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete(
    "/customers/{customer_id}",
    response_model=MessageResponse,
    summary="Delete Customer",
    description="Deletes the customer. Their sales are kept and still count in analytics."
)
def delete_customer(customer_id: UUID, store: EntityStore = Depends(get_store)):
    try:
        store.delete_customer(customer_id)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(message="Customer deleted successfully")
