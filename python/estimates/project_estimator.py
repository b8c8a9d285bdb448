"""
Project Estimator Module

Prices a service from a salary fund: flat salary taxes, expenses,
profit margin and VAT. Two pricing strategies are available:
additive margin and divisive margin.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

import yaml

from common.errors import InvalidInputError
from common.money import money_float, quantize_money, require_non_negative

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class PositionKind(Enum):
    """How a position is paid."""
    HOURLY = "hourly"
    DAILY = "daily"
    MONTHLY = "monthly"


POSITION_FIELDS = {
    PositionKind.HOURLY: ("hourly_rate", "hours_per_day", "days_per_month"),
    PositionKind.DAILY: ("daily_rate", "days_per_month"),
    PositionKind.MONTHLY: ("monthly_salary",),
}

ALL_POSITION_FIELDS = ("hourly_rate", "hours_per_day", "days_per_month", "daily_rate", "monthly_salary")


@dataclass(frozen=True)
class Position:
    """Salaried position; the fields that must be set depend on kind."""

    kind: PositionKind
    hourly_rate: Decimal | None = None
    hours_per_day: Decimal | None = None
    days_per_month: Decimal | None = None
    daily_rate: Decimal | None = None
    monthly_salary: Decimal | None = None

    def __post_init__(self):
        if not isinstance(self.kind, PositionKind):
            try:
                object.__setattr__(self, "kind", PositionKind(self.kind))
            except ValueError:
                raise InvalidInputError(f"Unknown position kind: {self.kind!r}")

        required = POSITION_FIELDS[self.kind]
        for name in ALL_POSITION_FIELDS:
            value = getattr(self, name)
            if name in required:
                if value is None:
                    raise InvalidInputError(f"{self.kind.value} position requires {name}")
                object.__setattr__(self, name, require_non_negative(value, name))
            elif value is not None:
                raise InvalidInputError(f"{self.kind.value} position does not take {name}")

    @property
    def monthly_amount(self) -> Decimal:
        """Net monthly salary of the position."""
        if self.kind == PositionKind.HOURLY:
            return self.hourly_rate * self.hours_per_day * self.days_per_month
        elif self.kind == PositionKind.DAILY:
            return self.daily_rate * self.days_per_month
        return self.monthly_salary


@dataclass(frozen=True)
class Expense:
    """Non-salary project expense."""

    name: str
    value: Decimal

    def __post_init__(self):
        object.__setattr__(self, "value", require_non_negative(self.value, f"expense {self.name!r}"))


@dataclass(frozen=True)
class EstimateInput:
    """Positions, expenses and pricing options for an estimate."""

    positions: tuple[Position, ...]
    expenses: tuple[Expense, ...] = ()
    profit_margin_percent: Decimal = Decimal("20")
    is_vat_payer: bool = False

    def __post_init__(self):
        object.__setattr__(self, "positions", tuple(self.positions))
        object.__setattr__(self, "expenses", tuple(self.expenses))
        object.__setattr__(
            self,
            "profit_margin_percent",
            require_non_negative(self.profit_margin_percent, "profit_margin_percent"),
        )


@dataclass(frozen=True)
class SalaryStack:
    """Salary fund with flat-rate taxes."""

    hourly_total: Decimal
    daily_total: Decimal
    monthly_total: Decimal
    salary_fund_net: Decimal
    positions_count: int
    stamp_duty: Decimal
    gross_amount: Decimal
    income_tax: Decimal
    social_payment: Decimal
    total_salary_with_taxes: Decimal


@dataclass(frozen=True)
class EstimateResult:
    """Priced estimate."""

    strategy: str
    salary: SalaryStack
    expenses_total: Decimal
    profit_value: Decimal
    service_value: Decimal
    vat: Decimal
    final_total: Decimal
    notes: list[str] = field(default_factory=list)

    @property
    def base_cost(self) -> Decimal:
        return self.salary.total_salary_with_taxes + self.expenses_total

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "hourly_total": money_float(self.salary.hourly_total),
            "daily_total": money_float(self.salary.daily_total),
            "monthly_total": money_float(self.salary.monthly_total),
            "salary_fund_net": money_float(self.salary.salary_fund_net),
            "positions_count": self.salary.positions_count,
            "stamp_duty": money_float(self.salary.stamp_duty),
            "gross_amount": money_float(self.salary.gross_amount),
            "income_tax": money_float(self.salary.income_tax),
            "social_payment": money_float(self.salary.social_payment),
            "total_salary_with_taxes": money_float(self.salary.total_salary_with_taxes),
            "expenses_total": money_float(self.expenses_total),
            "profit_value": money_float(self.profit_value),
            "service_value": money_float(self.service_value),
            "vat": money_float(self.vat),
            "final_total": money_float(self.final_total),
            "notes": self.notes,
        }


class BaseEstimator(ABC):
    """Shared salary stack, expenses and VAT; subclasses add the margin."""

    STRATEGY: str = "base"

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize estimator with pricing rules.

        Args:
            config_dir: Directory containing estimate_rules.yaml
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self._load_rules()

    def _load_rules(self) -> None:
        """Load pricing rules from YAML configuration."""
        rules_file = self.config_dir / "estimate_rules.yaml"
        if rules_file.exists():
            with open(rules_file) as f:
                self.rules = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Estimate rules not found: {rules_file}, using defaults")
            self.rules = {}

        stack = self.rules.get("salary_stack", {})
        self.stamp_duty_per_position = Decimal(str(stack.get("stamp_duty_per_position", 3000)))
        self.net_share_of_gross = Decimal(str(stack.get("net_share_of_gross", "0.75")))
        self.income_tax_rate = Decimal(str(stack.get("income_tax_rate", "0.20")))
        self.social_rate = Decimal(str(stack.get("social_rate", "0.05")))

        pricing = self.rules.get("pricing", {})
        self.profit_share = Decimal(str(pricing.get("profit_share", "0.82")))
        self.vat_rate = Decimal(str(pricing.get("vat_rate", "0.20")))

        if self.net_share_of_gross <= 0:
            raise InvalidInputError("net_share_of_gross must be positive")

    def salary_stack(self, positions: Iterable[Position]) -> SalaryStack:
        """Sum the salary fund and apply the flat salary taxes.

        Only positions with a non-zero monthly amount count toward the
        per-head stamp duty.
        """
        totals = {kind: ZERO for kind in PositionKind}
        positions_count = 0

        for position in positions:
            amount = position.monthly_amount
            if amount > 0:
                totals[position.kind] += amount
                positions_count += 1

        salary_fund_net = sum(totals.values(), ZERO)
        stamp_duty = self.stamp_duty_per_position * positions_count
        gross_amount = quantize_money((salary_fund_net + stamp_duty) / self.net_share_of_gross)
        income_tax = gross_amount * self.income_tax_rate
        social_payment = gross_amount * self.social_rate

        return SalaryStack(
            hourly_total=totals[PositionKind.HOURLY],
            daily_total=totals[PositionKind.DAILY],
            monthly_total=totals[PositionKind.MONTHLY],
            salary_fund_net=salary_fund_net,
            positions_count=positions_count,
            stamp_duty=stamp_duty,
            gross_amount=gross_amount,
            income_tax=income_tax,
            social_payment=social_payment,
            total_salary_with_taxes=salary_fund_net + income_tax + social_payment + stamp_duty,
        )

    @abstractmethod
    def apply_margin(self, base_cost: Decimal, margin_percent: Decimal) -> tuple[Decimal, Decimal]:
        """Return (profit_value, service_value) for a base cost."""
        pass

    def estimate(self, estimate_input: EstimateInput) -> EstimateResult:
        """Price an estimate.

        Args:
            estimate_input: Positions, expenses, margin and VAT status

        Returns:
            EstimateResult with salary stack, profit, VAT and final total
        """
        salary = self.salary_stack(estimate_input.positions)
        expenses_total = sum((e.value for e in estimate_input.expenses), ZERO)
        base_cost = salary.total_salary_with_taxes + expenses_total

        profit_value, service_value = self.apply_margin(
            base_cost, estimate_input.profit_margin_percent
        )
        vat = service_value * self.vat_rate if estimate_input.is_vat_payer else ZERO

        notes = []
        if salary.positions_count == 0:
            notes.append("No position has a non-zero salary")

        logger.debug(
            f"{self.STRATEGY} estimate: base={base_cost} profit={profit_value} "
            f"service={service_value} vat={vat}"
        )

        return EstimateResult(
            strategy=self.STRATEGY,
            salary=salary,
            expenses_total=expenses_total,
            profit_value=profit_value,
            service_value=service_value,
            vat=vat,
            final_total=service_value + vat,
            notes=notes,
        )


class AdditiveMarginEstimator(BaseEstimator):
    """Margin taken on cost; only the configured share of it (82%) is priced in."""

    STRATEGY = "additive"

    def apply_margin(self, base_cost: Decimal, margin_percent: Decimal) -> tuple[Decimal, Decimal]:
        profit_value = base_cost * margin_percent / 100
        return profit_value, base_cost + profit_value * self.profit_share


class DivisiveMarginEstimator(BaseEstimator):
    """Margin taken on price: service = cost / (1 - margin)."""

    STRATEGY = "divisive"

    def apply_margin(self, base_cost: Decimal, margin_percent: Decimal) -> tuple[Decimal, Decimal]:
        divisor = 1 - margin_percent / 100
        if divisor <= 0:
            raise InvalidInputError(
                f"Profit margin must be below 100% for divisive pricing, got {margin_percent}"
            )
        service_value = quantize_money(base_cost / divisor)
        return service_value - base_cost, service_value


ESTIMATORS: dict[str, type[BaseEstimator]] = {
    AdditiveMarginEstimator.STRATEGY: AdditiveMarginEstimator,
    DivisiveMarginEstimator.STRATEGY: DivisiveMarginEstimator,
}

_estimators: dict[str, BaseEstimator] = {}


def get_estimator(strategy: str) -> BaseEstimator:
    """Shared estimator instance for a strategy name."""
    if strategy not in ESTIMATORS:
        raise InvalidInputError(
            f"Unknown strategy: {strategy!r}. Use one of {sorted(ESTIMATORS)}"
        )
    if strategy not in _estimators:
        _estimators[strategy] = ESTIMATORS[strategy]()
    return _estimators[strategy]


def estimate_project(estimate_input: EstimateInput, strategy: str = "additive") -> EstimateResult:
    """Price a project with the named strategy ('additive' or 'divisive')."""
    return get_estimator(strategy).estimate(estimate_input)


def build_estimate_input(data: dict[str, Any]) -> EstimateInput:
    """Build an EstimateInput from a decoded JSON payload.

    Args:
        data: Dict with 'positions', 'expenses', 'profit_margin_percent', 'is_vat_payer'

    Returns:
        Validated EstimateInput
    """
    positions = []
    for item in data.get("positions", []):
        fields = {name: item.get(name) for name in ALL_POSITION_FIELDS}
        positions.append(Position(kind=item.get("kind"), **fields))

    expenses = [
        Expense(name=item.get("name", ""), value=item.get("value", 0))
        for item in data.get("expenses", [])
    ]

    return EstimateInput(
        positions=tuple(positions),
        expenses=tuple(expenses),
        profit_margin_percent=data.get("profit_margin_percent", 20),
        is_vat_payer=bool(data.get("is_vat_payer", False)),
    )
