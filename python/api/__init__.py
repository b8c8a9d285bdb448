"""
FastAPI Backend for the Calculators

Exposes the payroll, estimate and tax calculators as JSON endpoints.
"""

from .main import app

__all__ = ["app"]
