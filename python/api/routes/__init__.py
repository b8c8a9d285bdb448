"""
API Routes Package

Contains all route modules for the calculators API.
"""

from .catalog import router as catalog_router
from .payroll import router as payroll_router
from .estimates import router as estimates_router
from .tax import router as tax_router

__all__ = [
    "catalog_router",
    "payroll_router",
    "estimates_router",
    "tax_router",
]
