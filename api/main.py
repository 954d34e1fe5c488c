"""
Sales Dashboard API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.dependencies import get_current_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI application
app = FastAPI(
    title="Sales Dashboard API",
    description="REST API for customers, sales and dashboard analytics",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow all origins for the dashboard frontend in development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "sales-dashboard-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Sales Dashboard API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import analytics, auth, customers, demo, products, sales, uploads

protected = [Depends(get_current_user)]

app.include_router(auth.router, prefix="/api/v1", tags=["Auth"])
app.include_router(customers.router, prefix="/api/v1", tags=["Customers"], dependencies=protected)
app.include_router(sales.router, prefix="/api/v1", tags=["Sales"], dependencies=protected)
app.include_router(products.router, prefix="/api/v1", tags=["Products"], dependencies=protected)
app.include_router(analytics.router, prefix="/api/v1", tags=["Analytics"], dependencies=protected)
app.include_router(uploads.router, prefix="/api/v1", tags=["Uploads"], dependencies=protected)
app.include_router(demo.router, prefix="/api/v1", tags=["Demo"], dependencies=protected)
