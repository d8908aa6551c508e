"""
Cost Tracker - Main FastAPI Application

PURPOSE: FastAPI routes, endpoints, and application setup
SCOPE: HTTP API layer and request/response handling
DEPENDENCIES: FastAPI, all cost_tracker modules
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
from fastapi import FastAPI, Form, HTTPException, Query

from .config import config
from .database import open_costs_db
from .errors import ReadFailed, StorageUnavailable, WriteFailed
from .managers import CostsDB, SettingsStore
from .reports import ReportService
from .services import ExchangeRateService
from .validators import validate_cost_data, validate_exchange_url, sanitize_form_data

logger = logging.getLogger(__name__)

# Initialize service instances; the cost store is opened on startup
settings_store = SettingsStore(config.SETTINGS_FILE)
rate_service = ExchangeRateService(settings_store)
costs_db: Optional[CostsDB] = None
report_service: Optional[ReportService] = None


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Open the cost store once and share it for the process lifetime."""
    global costs_db, report_service
    try:
        costs_db = await open_costs_db(config.DB_FILE, config.DB_VERSION)
    except StorageUnavailable as e:
        logger.critical(f"Failed to initialize database: {e}")
        raise
    report_service = ReportService(costs_db, rate_service)
    logger.info("Database initialized successfully.")
    yield


# Initialize FastAPI app
app = FastAPI(title="Cost Tracker", lifespan=lifespan)


def _check_currency(currency: str) -> str:
    if currency not in config.CURRENCIES:
        raise HTTPException(
            status_code=400,
            detail=f"Currency must be one of {', '.join(config.CURRENCIES)}"
        )
    return currency


# ============================================================================
# COST ENDPOINTS
# ============================================================================

@app.post("/costs")
async def add_cost(
    sum: float = Form(...),
    currency: str = Form('USD'),
    category: str = Form(...),
    description: str = Form(...)
):
    """Add a new cost item; id and date are assigned by the store."""
    cost_data = sanitize_form_data({
        'sum': sum,
        'currency': currency,
        'category': category,
        'description': description
    })

    is_valid, validation_errors = validate_cost_data(cost_data)
    if not is_valid:
        raise HTTPException(status_code=400, detail={"errors": validation_errors})

    try:
        entry = await costs_db.add_cost(cost_data)
    except WriteFailed:
        raise HTTPException(status_code=500, detail="Failed to add cost item. Please try again.")

    return entry.to_dict()


@app.get("/costs")
async def get_costs():
    """Get all cost items."""
    try:
        costs = await costs_db.get_all_costs()
    except ReadFailed:
        raise HTTPException(status_code=500, detail="Failed to load cost items. Please try again.")
    return [cost.to_dict() for cost in costs]


# ============================================================================
# REPORT ENDPOINTS
# ============================================================================

@app.get("/reports/monthly")
async def get_monthly_report(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    currency: str = Query('USD')
):
    """Detailed report for one month with the total in the display currency."""
    _check_currency(currency)
    try:
        return await report_service.monthly_report(year, month, currency)
    except ReadFailed:
        raise HTTPException(status_code=500, detail="Failed to get report. Please try again.")


@app.get("/reports/categories")
async def get_category_totals(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    currency: str = Query('USD')
):
    """Per-category totals for one month (pie chart data)."""
    _check_currency(currency)
    try:
        return await report_service.category_totals(year, month, currency)
    except ReadFailed:
        raise HTTPException(status_code=500, detail="Failed to get category data. Please try again.")


@app.get("/reports/yearly")
async def get_yearly_totals(
    year: int = Query(...),
    currency: str = Query('USD')
):
    """Per-month totals for one year (bar chart data)."""
    _check_currency(currency)
    try:
        return await report_service.yearly_totals(year, currency)
    except ReadFailed:
        raise HTTPException(status_code=500, detail="Failed to get yearly data. Please try again.")


# ============================================================================
# SETTINGS ENDPOINTS
# ============================================================================

@app.get("/settings/exchange-url")
async def get_exchange_url():
    """Get the configured exchange rate endpoint."""
    return {"exchangeUrl": await settings_store.get_exchange_url()}


@app.put("/settings/exchange-url")
async def set_exchange_url(url: str = Form(...)):
    """Save a new exchange rate endpoint."""
    is_valid, validation_errors = validate_exchange_url(url)
    if not is_valid:
        raise HTTPException(status_code=400, detail={"errors": validation_errors})

    await settings_store.set_exchange_url(url.strip())
    return {"success": True, "exchangeUrl": url.strip()}


@app.post("/settings/exchange-url/reset")
async def reset_exchange_url():
    """Restore the default exchange rate endpoint."""
    url = await settings_store.reset_exchange_url()
    return {"success": True, "exchangeUrl": url}


# ============================================================================
# UTILITY ENDPOINTS
# ============================================================================

@app.get("/currencies")
async def get_currencies():
    """Get the supported currency codes."""
    return config.CURRENCIES


@app.get("/categories")
async def get_categories():
    """Get the suggested cost categories."""
    return config.DEFAULT_CATEGORIES


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


# ============================================================================
# APPLICATION ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cost_tracker.app:app", host="127.0.0.1", port=8000, reload=True)
