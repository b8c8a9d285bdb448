"""
Payroll Module

Armenian salary conversion: income tax, social contribution and
bracket-based stamp duty.
"""

from .brackets import BracketEntry, BracketTable, STAMP_DUTY_TABLE
from .salary_converter import (
    Direction,
    PayrollInput,
    PayrollResult,
    SalaryConverter,
    convert_salary,
)

__all__ = [
    # Brackets
    "BracketEntry",
    "BracketTable",
    "STAMP_DUTY_TABLE",
    # Salary Converter
    "Direction",
    "PayrollInput",
    "PayrollResult",
    "SalaryConverter",
    "convert_salary",
]
