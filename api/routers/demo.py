"""
Demo Data API Endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_store
from api.models import DemoDataResponse
from repositories.store import EntityStore
from services.demo_data_service import load_demo_data

router = APIRouter()


@router.post(
    "/demo/regenerate",
    response_model=DemoDataResponse,
    summary="Regenerate Demo Data",
    description="Replace all customers, sales and products with a fresh demo dataset. Users are kept."
)
def regenerate_demo_data(
    seed: Optional[int] = Query(None, description="Seed for reproducible data"),
    store: EntityStore = Depends(get_store),
):
    dataset = load_demo_data(store, seed=seed)
    return DemoDataResponse(
        customers=len(dataset.customers),
        sales=len(dataset.sales),
        products=len(dataset.products),
        message="Demo data regenerated",
    )
