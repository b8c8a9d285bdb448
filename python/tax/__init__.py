"""
Tax Module

Armenian turnover tax, annual profit tax return and VAT calculations.
"""

from .turnover_tax import (
    ActivityRow,
    ActivityTaxResult,
    TurnoverTaxEngine,
    TurnoverTaxResult,
    compute_turnover_tax,
)
from .profit_statement import (
    ProfitTaxStatement,
    RowKind,
    StatementResult,
    TaxStatementRow,
    evaluate_profit_statement,
)
from .vat_calculator import VATCalculator, VATComputation

__all__ = [
    # Turnover Tax
    "ActivityRow",
    "ActivityTaxResult",
    "TurnoverTaxEngine",
    "TurnoverTaxResult",
    "compute_turnover_tax",
    # Profit Statement
    "ProfitTaxStatement",
    "RowKind",
    "StatementResult",
    "TaxStatementRow",
    "evaluate_profit_statement",
    # VAT
    "VATCalculator",
    "VATComputation",
]
