"""
Common Module

Shared error types and money helpers used by all calculators.
"""

from .errors import InvalidInputError, StatementLayoutError
from .money import MAX_AMOUNT, money_float, percent_float, quantize_money, require_non_negative, to_decimal

__all__ = [
    "MAX_AMOUNT",
    "InvalidInputError",
    "StatementLayoutError",
    "money_float",
    "percent_float",
    "quantize_money",
    "require_non_negative",
    "to_decimal",
]
