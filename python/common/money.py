"""
Money Helpers

Decimal conversion, rounding and validation shared by the calculators.
All amounts are AMD; percentages are plain numbers where 20 means 20%.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .errors import InvalidInputError

CENT = Decimal("0.01")
PERCENT_STEP = Decimal("0.0001")

# Largest accepted input value: one quadrillion AMD
MAX_AMOUNT = Decimal("1000000000000000")


def to_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Convert a number or numeric string to Decimal.

    Args:
        value: int, float, str or Decimal
        field_name: Name used in the error message

    Returns:
        Decimal value
    """
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"{field_name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidInputError(f"{field_name} must be a number, got {value!r}")
    if not result.is_finite():
        raise InvalidInputError(f"{field_name} must be finite, got {value!r}")
    if abs(result) > MAX_AMOUNT:
        raise InvalidInputError(f"{field_name} exceeds the largest supported value {MAX_AMOUNT}")
    return result


def require_non_negative(value: Any, field_name: str) -> Decimal:
    """Convert to Decimal and reject negative values."""
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise InvalidInputError(f"{field_name} must not be negative, got {amount}")
    return amount


def quantize_money(amount: Decimal) -> Decimal:
    """Round to 0.01 AMD, half up.

    Raises InvalidInputError when the result has more digits than the
    decimal context holds, e.g. a product of several huge inputs.
    """
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInputError(f"Amount too large to round: {amount}")


def money_float(amount: Decimal) -> float:
    """Rounded float for JSON output."""
    return float(quantize_money(amount))


def percent_float(percent: Decimal) -> float:
    """Percentage rounded to four decimals for JSON output."""
    try:
        return float(percent.quantize(PERCENT_STEP, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise InvalidInputError(f"Percentage too large to round: {percent}")
