"""
Estimates Module

Project pricing from salary funds and itemized cost estimates.
"""

from .project_estimator import (
    AdditiveMarginEstimator,
    BaseEstimator,
    DivisiveMarginEstimator,
    EstimateInput,
    EstimateResult,
    Expense,
    Position,
    PositionKind,
    SalaryStack,
    build_estimate_input,
    estimate_project,
    get_estimator,
)
from .itemized import EstimateItem, ItemizedEstimate, ItemizedEstimator

__all__ = [
    # Project Estimator
    "AdditiveMarginEstimator",
    "BaseEstimator",
    "DivisiveMarginEstimator",
    "EstimateInput",
    "EstimateResult",
    "Expense",
    "Position",
    "PositionKind",
    "SalaryStack",
    "build_estimate_input",
    "estimate_project",
    "get_estimator",
    # Itemized
    "EstimateItem",
    "ItemizedEstimate",
    "ItemizedEstimator",
]
