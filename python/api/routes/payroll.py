"""
Payroll API Routes

Gross/net salary conversion.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from common.errors import InvalidInputError
from payroll.salary_converter import PayrollInput, convert_salary, salary_converter

router = APIRouter(prefix="/payroll", tags=["payroll"])


class PayrollRequest(BaseModel):
    """Salary conversion request."""

    amount: float
    direction: str = "grossToNet"  # 'grossToNet' or 'netToGross'
    is_social_contributor: bool = True
    is_it_company: bool = False


class PayrollResponse(BaseModel):
    """Salary conversion breakdown."""

    gross: float
    net: float
    income_tax: float
    social_contribution: float
    stamp_duty: float
    total_deductions: float
    direction: str


@router.post("/convert", response_model=PayrollResponse)
async def convert(request: PayrollRequest) -> PayrollResponse:
    """Convert a salary between gross and net.

    Args:
        request: Amount, direction and employee flags

    Returns:
        PayrollResponse with the deduction breakdown
    """
    try:
        payroll_input = PayrollInput(
            amount=request.amount,
            direction=request.direction,
            is_social_contributor=request.is_social_contributor,
            is_it_company=request.is_it_company,
        )
        result = convert_salary(payroll_input).to_dict()
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PayrollResponse(**result)


@router.get("/rules")
async def get_rules() -> dict:
    """Active payroll rates and stamp duty brackets."""
    return salary_converter.describe_rules()
