"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Currency values are Decimal and serialize as strings.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


# ============================================================================
# Auth Models
# ============================================================================

class LoginRequest(BaseModel):
    """Credentials for a dashboard user."""
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "admin@company.com",
                "password": "admin123"
            }
        }


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


# ============================================================================
# Customer Models
# ============================================================================

class CustomerCreate(BaseModel):
    """Request to create a customer."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    status: str = "active"
    total_spent: Decimal = Field(Decimal("0.00"), ge=0)
    total_orders: int = Field(0, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "John Smith",
                "email": "john.smith@email.com",
                "phone": "+1-555-123-4567",
                "company": "TechCorp Inc.",
                "city": "New York",
                "status": "active"
            }
        }


class CustomerUpdate(BaseModel):
    """Partial customer update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    phone: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    status: Optional[str] = None
    total_spent: Optional[Decimal] = Field(None, ge=0)
    total_orders: Optional[int] = Field(None, ge=0)


class CustomerResponse(BaseModel):
    customer_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    total_spent: Decimal
    total_orders: int
    status: str
    segment: str
    created_at: datetime


# ============================================================================
# Sale Models
# ============================================================================

class SaleCreate(BaseModel):
    """Request to record a sale. amount is computed, never supplied."""
    customer_id: UUID
    product: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0)
    status: str = "completed"

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "123e4567-e89b-12d3-a456-426614174000",
                "product": "Monitor 4K",
                "quantity": 2,
                "unit_price": "399.99",
                "status": "completed"
            }
        }


class SaleUpdate(BaseModel):
    """Partial sale update; amount follows quantity and unit_price."""
    customer_id: Optional[UUID] = None
    product: Optional[str] = Field(None, min_length=1)
    quantity: Optional[int] = Field(None, ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    status: Optional[str] = None


class SaleResponse(BaseModel):
    sale_id: UUID
    customer_id: Optional[UUID] = None
    customer_name: str
    product: str
    quantity: int
    unit_price: Decimal
    amount: Decimal
    status: str
    created_at: datetime


# ============================================================================
# Product Models
# ============================================================================

class ProductResponse(BaseModel):
    name: str
    price: Decimal
    category: Optional[str] = None


# ============================================================================
# Analytics Models
# ============================================================================

class SummaryResponse(BaseModel):
    total_revenue: Decimal
    total_customers: int
    total_sales: int
    average_order_value: Decimal


class RevenuePointResponse(BaseModel):
    label: str
    revenue: Decimal


class CountPointResponse(BaseModel):
    label: str
    count: int


class ProductPerformanceResponse(BaseModel):
    product: str
    revenue: Decimal
    quantity: int
    orders: int
    average_order_value: Decimal


class DashboardResponse(BaseModel):
    """Dashboard analytics over all data."""
    summary: SummaryResponse
    monthly_revenue: List[RevenuePointResponse]
    top_products: List[ProductPerformanceResponse]
    customer_segments: Dict[str, int]

    class Config:
        json_schema_extra = {
            "example": {
                "summary": {
                    "total_revenue": "350.00",
                    "total_customers": 3,
                    "total_sales": 3,
                    "average_order_value": "116.67"
                },
                "monthly_revenue": [
                    {"label": "Jan 2024", "revenue": "300.00"},
                    {"label": "Feb 2024", "revenue": "50.00"}
                ],
                "top_products": [],
                "customer_segments": {"High Value": 1, "Medium Value": 1, "Low Value": 1}
            }
        }


class TimeRangeReportResponse(BaseModel):
    """Analytics over the last `days` days; summary.total_customers counts new customers."""
    days: int
    start: datetime
    end: datetime
    summary: SummaryResponse
    daily_revenue: List[RevenuePointResponse]
    top_products: List[ProductPerformanceResponse]
    customer_acquisition: List[CountPointResponse]
    sales_by_status: Dict[str, int]


class CustomerTotalsResponse(BaseModel):
    """Stored customer totals next to totals recomputed from sales."""
    customer_id: UUID
    name: str
    stored_total_spent: Decimal
    stored_total_orders: int
    computed_total_spent: Decimal
    computed_total_orders: int


# ============================================================================
# Import / Misc Models
# ============================================================================

class ImportResponse(BaseModel):
    total_rows: int
    imported: int
    skipped: int
    errors: List[dict]
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "total_rows": 3,
                "imported": 2,
                "skipped": 1,
                "errors": [{"row": 3, "error": "Missing required field: email"}],
                "message": "2 customers imported successfully"
            }
        }


class MessageResponse(BaseModel):
    message: str


class DemoDataResponse(BaseModel):
    customers: int
    sales: int
    products: int
    message: str
