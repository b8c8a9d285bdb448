"""
Estimates API Routes

Project pricing from salary positions and itemized estimates.
"""

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from common.errors import InvalidInputError
from estimates.itemized import ItemizedEstimator
from estimates.project_estimator import build_estimate_input, estimate_project

router = APIRouter(prefix="/estimates", tags=["estimates"])

itemized_estimator = ItemizedEstimator()


class PositionInput(BaseModel):
    """Salaried position."""

    kind: str  # 'hourly', 'daily', 'monthly'
    hourly_rate: float | None = None
    hours_per_day: float | None = None
    days_per_month: float | None = None
    daily_rate: float | None = None
    monthly_salary: float | None = None


class ExpenseInput(BaseModel):
    """Non-salary expense."""

    name: str = ""
    value: float = 0


class ProjectEstimateRequest(BaseModel):
    """Project estimate request."""

    positions: list[PositionInput]
    expenses: list[ExpenseInput] = []
    profit_margin_percent: float = 20
    is_vat_payer: bool = False


class ProjectEstimateResponse(BaseModel):
    """Priced project estimate."""

    strategy: str
    hourly_total: float
    daily_total: float
    monthly_total: float
    salary_fund_net: float
    positions_count: int
    stamp_duty: float
    gross_amount: float
    income_tax: float
    social_payment: float
    total_salary_with_taxes: float
    expenses_total: float
    profit_value: float
    service_value: float
    vat: float
    final_total: float
    notes: list[str] = []


class EstimateItemInput(BaseModel):
    """Itemized estimate line."""

    name: str = ""
    quantity: float = 1
    unit_price: float = 0


class ItemizedEstimateRequest(BaseModel):
    """Itemized estimate request."""

    items: list[EstimateItemInput]
    vat_percent: float | None = None
    margin_percent: float | None = None


@router.post("/project", response_model=ProjectEstimateResponse)
async def project_estimate(
    request: ProjectEstimateRequest,
    strategy: str = Query("additive", description="'additive' or 'divisive'"),
) -> ProjectEstimateResponse:
    """Price a project from its salary positions and expenses.

    Args:
        request: Positions, expenses, margin and VAT status
        strategy: Margin strategy

    Returns:
        ProjectEstimateResponse
    """
    try:
        estimate_input = build_estimate_input(request.model_dump())
        result = estimate_project(estimate_input, strategy=strategy).to_dict()
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ProjectEstimateResponse(**result)


@router.post("/itemized")
async def itemized_estimate(request: ItemizedEstimateRequest) -> dict:
    """Price an itemized estimate."""
    try:
        estimate = itemized_estimator.create_estimate(
            items=[item.model_dump() for item in request.items],
            vat_percent=request.vat_percent,
            margin_percent=request.margin_percent,
        ).to_dict()
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return estimate
