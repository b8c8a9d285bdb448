"""
FastAPI Main Application

Entry point for the calculators API.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.registry import calculator_catalog

from .routes import (
    catalog_router,
    estimates_router,
    payroll_router,
    tax_router,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Serving {len(calculator_catalog.visible())} calculators")
    yield
    logger.info("Calculators API stopped")


app = FastAPI(
    title="Calculators API",
    description="Armenian payroll, project pricing and tax calculators",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration
cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(catalog_router, prefix="/api")
app.include_router(payroll_router, prefix="/api")
app.include_router(estimates_router, prefix="/api")
app.include_router(tax_router, prefix="/api")


@app.get("/")
async def root():
    """Service name and the calculators it serves."""
    return {
        "name": "Calculators API",
        "version": "1.0.0",
        "calculators": [
            {"slug": c.slug, "endpoint": c.endpoint}
            for c in calculator_catalog.visible()
            if c.endpoint
        ],
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api")
async def api_info():
    """API information endpoint."""
    return {
        "endpoints": {
            "calculators": "/api/calculators",
            "payroll": "/api/payroll/convert",
            "project_estimate": "/api/estimates/project?strategy=additive|divisive",
            "itemized_estimate": "/api/estimates/itemized",
            "turnover_tax": "/api/tax/turnover",
            "profit_statement": "/api/tax/profit-statement",
            "vat": "/api/tax/vat",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
