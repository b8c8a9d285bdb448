"""
Catalog Module

Registry of calculators offered on the site.
"""

from .registry import CalculatorCatalog, CalculatorInfo, calculator_catalog

__all__ = [
    "CalculatorCatalog",
    "CalculatorInfo",
    "calculator_catalog",
]
