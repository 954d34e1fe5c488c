"""
Products API Endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_store
from api.models import ProductResponse
from repositories.store import EntityStore

router = APIRouter()


@router.get(
    "/products",
    response_model=List[ProductResponse],
    summary="List Products",
    description="Product catalog sorted by name."
)
def list_products(store: EntityStore = Depends(get_store)):
    return [
        ProductResponse(name=p.name, price=p.price, category=p.category)
        for p in store.list_products()
    ]
