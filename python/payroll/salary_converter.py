"""
Salary Converter Module

Converts between gross and net salary under Armenian payroll rules:
income tax, funded pension (social) contribution and stamp duty.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from common.errors import InvalidInputError
from common.money import money_float, quantize_money, require_non_negative
from .brackets import DEFAULT_STAMP_DUTY_BRACKETS, BracketTable

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class Direction(Enum):
    """Conversion direction."""
    GROSS_TO_NET = "grossToNet"
    NET_TO_GROSS = "netToGross"


@dataclass(frozen=True)
class PayrollInput:
    """Salary conversion request."""

    amount: Decimal
    direction: Direction = Direction.GROSS_TO_NET
    is_social_contributor: bool = True
    is_it_company: bool = False

    def __post_init__(self):
        object.__setattr__(self, "amount", require_non_negative(self.amount, "amount"))
        if not isinstance(self.direction, Direction):
            try:
                object.__setattr__(self, "direction", Direction(self.direction))
            except ValueError:
                raise InvalidInputError(f"Unknown direction: {self.direction!r}")


@dataclass(frozen=True)
class PayrollResult:
    """Salary conversion result."""

    gross: Decimal
    net: Decimal
    income_tax: Decimal
    social_contribution: Decimal
    stamp_duty: Decimal
    total_deductions: Decimal
    direction: Direction = Direction.GROSS_TO_NET

    def to_dict(self) -> dict:
        return {
            "gross": money_float(self.gross),
            "net": money_float(self.net),
            "income_tax": money_float(self.income_tax),
            "social_contribution": money_float(self.social_contribution),
            "stamp_duty": money_float(self.stamp_duty),
            "total_deductions": money_float(self.total_deductions),
            "direction": self.direction.value,
        }


class SalaryConverter:
    """Armenian gross/net salary converter."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize converter with payroll rules.

        Args:
            config_dir: Directory containing payroll_rules.yaml
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self._load_rules()

    def _load_rules(self) -> None:
        """Load payroll rules from YAML configuration."""
        rules_file = self.config_dir / "payroll_rules.yaml"
        if rules_file.exists():
            with open(rules_file) as f:
                self.rules = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Payroll rules not found: {rules_file}, using defaults")
            self.rules = {}

        income_tax = self.rules.get("income_tax", {})
        self.standard_rate = Decimal(str(income_tax.get("standard_rate", "0.20")))
        self.it_company_rate = Decimal(str(income_tax.get("it_company_rate", "0.10")))

        social = self.rules.get("social_contribution", {})
        self.social_low_threshold = Decimal(str(social.get("low_threshold", 500000)))
        self.social_low_rate = Decimal(str(social.get("low_rate", "0.05")))
        self.social_high_threshold = Decimal(str(social.get("high_threshold", 1125000)))
        self.social_high_rate = Decimal(str(social.get("high_rate", "0.10")))
        self.social_high_offset = Decimal(str(social.get("high_offset", 25000)))
        self.social_cap = Decimal(str(social.get("cap_amount", 87500)))

        brackets = self.rules.get("stamp_duty", {}).get("brackets", DEFAULT_STAMP_DUTY_BRACKETS)
        self.stamp_duty_table = BracketTable.from_config(brackets)

    # ==================== Components ====================

    def tax_rate(self, is_it_company: bool) -> Decimal:
        return self.it_company_rate if is_it_company else self.standard_rate

    def income_tax(self, gross: Decimal, is_it_company: bool = False) -> Decimal:
        """Income tax: 20%, or 10% for IT companies."""
        return gross * self.tax_rate(is_it_company)

    def social_contribution(self, gross: Decimal, is_social_contributor: bool = True) -> Decimal:
        """Funded pension contribution by gross salary bracket.

        Args:
            gross: Gross salary
            is_social_contributor: Whether the employee participates

        Returns:
            5% below 500,000; 10% - 25,000 below 1,125,000; 87,500 above
        """
        if not is_social_contributor:
            return ZERO

        if gross < self.social_low_threshold:
            return gross * self.social_low_rate
        elif gross < self.social_high_threshold:
            return gross * self.social_high_rate - self.social_high_offset
        return self.social_cap

    def stamp_duty(self, amount: Decimal) -> Decimal:
        """Stamp duty for the bracket the amount falls into."""
        return self.stamp_duty_table.value_for(amount)

    # ==================== Conversion ====================

    def convert(self, payroll_input: PayrollInput) -> PayrollResult:
        """Convert a salary in the requested direction.

        Args:
            payroll_input: Amount, direction and employee flags

        Returns:
            PayrollResult with the full deduction breakdown
        """
        if payroll_input.amount == 0:
            return PayrollResult(
                gross=ZERO,
                net=ZERO,
                income_tax=ZERO,
                social_contribution=ZERO,
                stamp_duty=ZERO,
                total_deductions=ZERO,
                direction=payroll_input.direction,
            )

        if payroll_input.direction == Direction.GROSS_TO_NET:
            result = self.gross_to_net(
                payroll_input.amount,
                payroll_input.is_social_contributor,
                payroll_input.is_it_company,
            )
        else:
            result = self.net_to_gross(
                payroll_input.amount,
                payroll_input.is_social_contributor,
                payroll_input.is_it_company,
            )

        logger.debug(
            f"{payroll_input.direction.value} {payroll_input.amount}: "
            f"gross={result.gross} net={result.net}"
        )
        return result

    def gross_to_net(
        self,
        gross: Decimal,
        is_social_contributor: bool = True,
        is_it_company: bool = False
    ) -> PayrollResult:
        """Compute net salary from gross."""
        income_tax = self.income_tax(gross, is_it_company)
        social = self.social_contribution(gross, is_social_contributor)
        stamp_duty = self.stamp_duty(gross)

        total_deductions = income_tax + social + stamp_duty

        return PayrollResult(
            gross=gross,
            net=gross - total_deductions,
            income_tax=income_tax,
            social_contribution=social,
            stamp_duty=stamp_duty,
            total_deductions=total_deductions,
            direction=Direction.GROSS_TO_NET,
        )

    def net_to_gross(
        self,
        net: Decimal,
        is_social_contributor: bool = True,
        is_it_company: bool = False
    ) -> PayrollResult:
        """Solve gross salary from net in one algebraic step.

        Stamp duty is looked up on the net amount and the social bracket is
        picked by comparing the net amount against the gross thresholds. The
        derived gross is not re-checked against its own bracket, so results
        near bracket edges are approximate.
        """
        tax_rate = self.tax_rate(is_it_company)
        stamp_duty = self.stamp_duty(net)

        if is_social_contributor:
            if net < self.social_low_threshold:
                numerator = net + stamp_duty
                denominator = 1 - tax_rate - self.social_low_rate
            elif net < self.social_high_threshold:
                numerator = net + stamp_duty + self.social_high_offset
                denominator = 1 - tax_rate - self.social_high_rate
            else:
                numerator = net + stamp_duty + self.social_cap
                denominator = 1 - tax_rate
        else:
            numerator = net + stamp_duty
            denominator = 1 - tax_rate

        if denominator <= 0:
            raise InvalidInputError(
                f"Tax and social rates add up to 100% or more (divisor {denominator})"
            )

        gross = quantize_money(numerator / denominator)

        income_tax = self.income_tax(gross, is_it_company)
        social = self.social_contribution(gross, is_social_contributor)

        return PayrollResult(
            gross=gross,
            net=net,
            income_tax=income_tax,
            social_contribution=social,
            stamp_duty=stamp_duty,
            total_deductions=income_tax + social + stamp_duty,
            direction=Direction.NET_TO_GROSS,
        )

    def describe_rules(self) -> dict[str, Any]:
        """Active rates, for display next to a calculation."""
        return {
            "income_tax": {
                "standard_rate": float(self.standard_rate),
                "it_company_rate": float(self.it_company_rate),
            },
            "social_contribution": {
                "low_threshold": float(self.social_low_threshold),
                "low_rate": float(self.social_low_rate),
                "high_threshold": float(self.social_high_threshold),
                "high_rate": float(self.social_high_rate),
                "high_offset": float(self.social_high_offset),
                "cap_amount": float(self.social_cap),
            },
            "stamp_duty": [e.to_dict() for e in self.stamp_duty_table.entries],
        }


salary_converter = SalaryConverter()


def convert_salary(payroll_input: PayrollInput) -> PayrollResult:
    """Convert a salary with the default payroll rules."""
    return salary_converter.convert(payroll_input)
