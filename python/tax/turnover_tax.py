"""
Turnover Tax Module

Quarterly turnover tax per activity, with cost deductions and a
minimum-tax floor for deduction-based activities.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Iterable

import yaml

from common.errors import InvalidInputError
from common.money import money_float, percent_float, require_non_negative

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class ActivityRow:
    """One business activity of a turnover tax return.

    Fixed-rate activities ignore costs, deduction and minimum tax.
    """

    turnover: Decimal
    tax_rate_percent: Decimal
    is_fixed_rate: bool = False
    direct_costs: Decimal = ZERO
    admin_costs: Decimal = ZERO
    deduction_percent: Decimal | None = None
    min_tax_percent: Decimal | None = None
    name: str = ""

    def __post_init__(self):
        for name in ("turnover", "tax_rate_percent", "direct_costs", "admin_costs"):
            object.__setattr__(self, name, require_non_negative(getattr(self, name), name))

        if self.is_fixed_rate:
            object.__setattr__(self, "deduction_percent", ZERO)
            object.__setattr__(self, "min_tax_percent", ZERO)
            return

        for name in ("deduction_percent", "min_tax_percent"):
            value = getattr(self, name)
            if value is None:
                raise InvalidInputError(
                    f"Activity {self.name or '(unnamed)'} needs {name} unless it is fixed-rate"
                )
            object.__setattr__(self, name, require_non_negative(value, name))


@dataclass(frozen=True)
class ActivityTaxResult:
    """Tax computed for one activity."""

    turnover: Decimal
    min_tax_amount: Decimal
    actual_tax_percent: Decimal
    tax_payable: Decimal
    name: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "turnover": money_float(self.turnover),
            "min_tax_amount": money_float(self.min_tax_amount),
            "actual_tax_percent": percent_float(self.actual_tax_percent),
            "tax_payable": money_float(self.tax_payable),
        }


@dataclass
class TurnoverTaxResult:
    """Turnover tax for all activities."""

    per_row: list[ActivityTaxResult] = field(default_factory=list)
    total_tax_payable: Decimal = ZERO
    total_turnover: Decimal = ZERO
    overall_tax_percent: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "per_row": [r.to_dict() for r in self.per_row],
            "total_tax_payable": money_float(self.total_tax_payable),
            "total_turnover": money_float(self.total_turnover),
            "overall_tax_percent": percent_float(self.overall_tax_percent),
        }


class TurnoverTaxEngine:
    """Turnover tax calculator."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize engine with activity templates.

        Args:
            config_dir: Directory containing tax_rules.yaml
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self._load_rules()

    def _load_rules(self) -> None:
        """Load activity templates from YAML configuration."""
        rules_file = self.config_dir / "tax_rules.yaml"
        if rules_file.exists():
            with open(rules_file) as f:
                self.rules = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Tax rules not found: {rules_file}, no default activities")
            self.rules = {}

        self.activity_templates = self.rules.get("turnover_tax", {}).get("activities", [])

    def default_activities(self) -> list[ActivityRow]:
        """Activity templates with zero turnover, ready to be filled in."""
        return [
            ActivityRow(
                name=template.get("name", ""),
                turnover=ZERO,
                tax_rate_percent=template.get("tax_rate_percent", 0),
                is_fixed_rate=template.get("is_fixed_rate", False),
                deduction_percent=template.get("deduction_percent"),
                min_tax_percent=template.get("min_tax_percent"),
            )
            for template in self.activity_templates
        ]

    def compute_row(self, row: ActivityRow) -> ActivityTaxResult:
        """Compute tax for one activity.

        Args:
            row: Activity with turnover, costs and rates

        Returns:
            ActivityTaxResult; payable tax never falls below the minimum tax
        """
        if row.is_fixed_rate:
            return ActivityTaxResult(
                name=row.name,
                turnover=row.turnover,
                min_tax_amount=ZERO,
                actual_tax_percent=row.tax_rate_percent,
                tax_payable=row.turnover * row.tax_rate_percent / 100,
            )

        calculated_tax = (
            row.turnover * row.tax_rate_percent / 100
            - (row.direct_costs + row.admin_costs) * row.deduction_percent / 100
        )
        min_tax_amount = row.turnover * row.min_tax_percent / 100
        tax_payable = max(calculated_tax, min_tax_amount)

        if row.turnover > 0:
            actual_tax_percent = tax_payable / row.turnover * 100
        else:
            actual_tax_percent = ZERO

        return ActivityTaxResult(
            name=row.name,
            turnover=row.turnover,
            min_tax_amount=min_tax_amount,
            actual_tax_percent=actual_tax_percent,
            tax_payable=tax_payable,
        )

    def compute(self, rows: Iterable[ActivityRow]) -> TurnoverTaxResult:
        """Compute tax for all activities and the aggregate.

        Args:
            rows: Activities of the return

        Returns:
            TurnoverTaxResult with per-row results and totals
        """
        result = TurnoverTaxResult(per_row=[self.compute_row(row) for row in rows])

        result.total_tax_payable = sum((r.tax_payable for r in result.per_row), ZERO)
        result.total_turnover = sum((r.turnover for r in result.per_row), ZERO)
        if result.total_turnover > 0:
            result.overall_tax_percent = result.total_tax_payable / result.total_turnover * 100

        logger.debug(
            f"Turnover tax for {len(result.per_row)} activities: "
            f"{result.total_tax_payable} on {result.total_turnover}"
        )
        return result


turnover_tax_engine = TurnoverTaxEngine()


def compute_turnover_tax(rows: Iterable[ActivityRow]) -> TurnoverTaxResult:
    """Compute turnover tax with the default engine."""
    return turnover_tax_engine.compute(rows)
