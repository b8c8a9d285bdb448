"""
Tax API Routes

Turnover tax, profit tax return and VAT endpoints.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from common.errors import InvalidInputError
from tax.profit_statement import profit_tax_statement
from tax.turnover_tax import ActivityRow, compute_turnover_tax, turnover_tax_engine
from tax.vat_calculator import VATCalculator

router = APIRouter(prefix="/tax", tags=["tax"])

vat_calculator = VATCalculator()


class ActivityRowInput(BaseModel):
    """Turnover tax activity."""

    name: str = ""
    turnover: float = 0
    direct_costs: float = 0
    admin_costs: float = 0
    tax_rate_percent: float
    deduction_percent: float | None = None
    min_tax_percent: float | None = None
    is_fixed_rate: bool = False


class TurnoverTaxRequest(BaseModel):
    """Turnover tax return."""

    activities: list[ActivityRowInput]


class ProfitStatementRequest(BaseModel):
    """Profit tax return input rows keyed by row number or detail code."""

    inputs: dict[str, float] = {}


class VATRequest(BaseModel):
    """VAT computation request."""

    amount: float
    is_inclusive: bool = False
    rate_percent: float | None = None


@router.post("/turnover")
async def turnover_tax(request: TurnoverTaxRequest) -> dict:
    """Compute turnover tax per activity and in total."""
    try:
        rows = [ActivityRow(**activity.model_dump()) for activity in request.activities]
        result = compute_turnover_tax(rows).to_dict()
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result


@router.get("/turnover/defaults")
async def turnover_defaults() -> list[dict]:
    """Activity templates with their default rates."""
    return [
        {
            "name": row.name,
            "tax_rate_percent": float(row.tax_rate_percent),
            "deduction_percent": float(row.deduction_percent),
            "min_tax_percent": float(row.min_tax_percent),
            "is_fixed_rate": row.is_fixed_rate,
        }
        for row in turnover_tax_engine.default_activities()
    ]


@router.post("/profit-statement")
async def profit_statement(request: ProfitStatementRequest) -> dict:
    """Evaluate the annual profit tax return."""
    try:
        result = profit_tax_statement.evaluate(request.inputs).to_dict()
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result


@router.get("/profit-statement/layout")
async def profit_statement_layout() -> list[dict]:
    """Rows of the return in form order."""
    return [row.to_dict() for row in profit_tax_statement.layout()]


@router.post("/vat")
async def vat(request: VATRequest) -> dict:
    """Compute VAT from a net amount or extract it from a gross amount."""
    try:
        result = vat_calculator.compute_vat(
            request.amount,
            is_inclusive=request.is_inclusive,
            rate_percent=request.rate_percent,
        ).to_dict()
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result
