"""
Upload API Endpoints.

CSV imports for customers and sales.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from api.dependencies import get_store
from api.models import ImportResponse
from repositories.store import EntityStore
from services.csv_import_service import ImportResult, import_customers_csv, import_sales_csv

router = APIRouter()


def _read_csv_upload(file: UploadFile) -> str:
    raw = file.file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="No file uploaded")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")


def _to_response(result: ImportResult, noun: str) -> ImportResponse:
    return ImportResponse(
        total_rows=result.total_rows,
        imported=result.imported,
        skipped=result.skipped,
        errors=result.errors,
        message=f"{result.imported} {noun} imported successfully",
    )


@router.post(
    "/upload/customers",
    response_model=ImportResponse,
    summary="Import Customers CSV",
    description="Columns: name, email, phone, company, city, status. Rows without name/email or with a known email are skipped."
)
def upload_customers(file: UploadFile = File(...), store: EntityStore = Depends(get_store)):
    content = _read_csv_upload(file)
    return _to_response(import_customers_csv(store, content), "customers")


@router.post(
    "/upload/sales",
    response_model=ImportResponse,
    summary="Import Sales CSV",
    description="Columns: customerName, product, quantity, unitPrice, status. customerName must match an existing customer."
)
def upload_sales(file: UploadFile = File(...), store: EntityStore = Depends(get_store)):
    content = _read_csv_upload(file)
    return _to_response(import_sales_csv(store, content), "sales")
