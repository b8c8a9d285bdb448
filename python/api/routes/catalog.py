"""
Catalog API Routes

Lists the calculators offered on the site.
"""

from fastapi import APIRouter, HTTPException, Query

from catalog.registry import calculator_catalog

router = APIRouter(prefix="/calculators", tags=["calculators"])


@router.get("")
async def list_calculators(
    category: str | None = Query(None),
    search: str | None = Query(None),
) -> list[dict]:
    """List visible calculators, optionally by category or search text."""
    if search:
        calculators = calculator_catalog.search(search)
    else:
        calculators = calculator_catalog.visible()

    if category:
        calculators = [c for c in calculators if c.category == category]

    return [c.to_dict() for c in calculators]


@router.get("/{slug}")
async def get_calculator(slug: str) -> dict:
    """Get a visible calculator by slug."""
    calculator = calculator_catalog.get_by_slug(slug)
    if calculator is None:
        raise HTTPException(status_code=404, detail="Calculator not found")
    return calculator.to_dict()
