"""
Tests for Tax Module

Tests for turnover tax and VAT computation.
"""

import pytest
from decimal import Decimal
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from common.errors import InvalidInputError
from tax.turnover_tax import (
    ActivityRow,
    TurnoverTaxEngine,
    TurnoverTaxResult,
    compute_turnover_tax,
)
from tax.vat_calculator import VATCalculator, VATComputation


def trade_row(**overrides) -> ActivityRow:
    """Deduction-based activity at 1.5% with 0.3% deduction and 0.5% floor."""
    data = {
        "name": "Trade",
        "turnover": 1000000,
        "tax_rate_percent": "1.5",
        "deduction_percent": "0.3",
        "min_tax_percent": "0.5",
    }
    data.update(overrides)
    return ActivityRow(**data)


class TestTurnoverTaxEngine:
    """Tests for turnover tax per activity and in aggregate."""

    @pytest.fixture
    def engine(self):
        """Create turnover tax engine instance."""
        return TurnoverTaxEngine()

    def test_fixed_rate_activity(self, engine):
        row = ActivityRow(name="Rent", turnover=1000000, tax_rate_percent="0.5", is_fixed_rate=True)
        result = engine.compute_row(row)

        assert result.tax_payable == Decimal("5000")
        assert result.min_tax_amount == 0
        assert result.actual_tax_percent == Decimal("0.5")

    def test_fixed_rate_ignores_costs(self, engine):
        row = ActivityRow(
            turnover=1000000,
            tax_rate_percent="0.5",
            is_fixed_rate=True,
            direct_costs=900000,
            deduction_percent=5,
        )
        assert row.deduction_percent == 0
        assert engine.compute_row(row).tax_payable == Decimal("5000")

    def test_deduction_based_activity(self, engine):
        result = engine.compute_row(trade_row())

        assert result.tax_payable == Decimal("15000")
        assert result.min_tax_amount == Decimal("5000")
        assert result.actual_tax_percent == Decimal("1.50")

    def test_costs_reduce_tax(self, engine):
        result = engine.compute_row(trade_row(direct_costs=1500000, admin_costs=500000))

        # 15,000 - 2,000,000 * 0.3%
        assert result.tax_payable == Decimal("9000")
        assert result.actual_tax_percent == Decimal("0.90")

    def test_minimum_tax_floor(self, engine):
        result = engine.compute_row(trade_row(direct_costs=3000000, admin_costs=1000000))

        assert result.tax_payable == Decimal("5000")
        assert result.actual_tax_percent == Decimal("0.50")

    @pytest.mark.parametrize("costs", [0, 100000, 2500000, 3333333, 10000000])
    def test_payable_never_below_floor(self, engine, costs):
        result = engine.compute_row(trade_row(direct_costs=costs))
        assert result.tax_payable >= result.min_tax_amount

    def test_zero_turnover(self, engine):
        result = engine.compute_row(trade_row(turnover=0, direct_costs=100000))

        assert result.tax_payable == 0
        assert result.actual_tax_percent == 0

    def test_aggregate(self, engine):
        rows = [
            ActivityRow(name="Rent", turnover=1000000, tax_rate_percent="0.5", is_fixed_rate=True),
            trade_row(),
        ]
        result = engine.compute(rows)

        assert isinstance(result, TurnoverTaxResult)
        assert len(result.per_row) == 2
        assert result.total_turnover == Decimal("2000000")
        assert result.total_tax_payable == Decimal("20000")
        assert result.overall_tax_percent == Decimal("1.00")

    def test_percentages_kept_exact(self, engine):
        """5 AMD on 3,000 of turnover is 0.1666...%, rounded only for output."""
        rows = [
            ActivityRow(turnover=1000, tax_rate_percent="0.5", is_fixed_rate=True),
            ActivityRow(turnover=2000, tax_rate_percent=0, is_fixed_rate=True),
        ]
        result = engine.compute(rows)

        assert result.total_tax_payable == Decimal("5")
        assert result.overall_tax_percent == Decimal(5) / Decimal(3000) * 100
        assert result.to_dict()["overall_tax_percent"] == 0.1667

    def test_row_percent_kept_exact(self, engine):
        result = engine.compute_row(trade_row(turnover=3000, direct_costs=13333, min_tax_percent=0))

        # 45 - 13,333 * 0.3%
        assert result.tax_payable == Decimal("5.001")
        assert result.actual_tax_percent == Decimal("0.1667")
        assert result.to_dict()["actual_tax_percent"] == 0.1667

    def test_aggregate_empty(self, engine):
        result = engine.compute([])

        assert result.total_tax_payable == 0
        assert result.overall_tax_percent == 0

    def test_missing_deduction_rejected(self):
        with pytest.raises(InvalidInputError):
            ActivityRow(turnover=1000, tax_rate_percent="1.5", min_tax_percent="0.5")

    def test_missing_min_tax_rejected(self):
        with pytest.raises(InvalidInputError):
            ActivityRow(turnover=1000, tax_rate_percent="1.5", deduction_percent="0.3")

    def test_negative_turnover_rejected(self):
        with pytest.raises(InvalidInputError):
            trade_row(turnover=-1)

    def test_default_activities(self, engine):
        activities = engine.default_activities()

        assert len(activities) == 11
        assert sum(1 for a in activities if not a.is_fixed_rate) == 5
        assert all(a.turnover == 0 for a in activities)
        assert all(a.name for a in activities)

    def test_missing_rules_file(self, tmp_path):
        engine = TurnoverTaxEngine(config_dir=tmp_path)
        assert engine.default_activities() == []

    def test_to_dict(self, engine):
        data = engine.compute([trade_row()]).to_dict()

        assert data["total_tax_payable"] == 15000.0
        assert data["per_row"][0]["name"] == "Trade"

    def test_module_level_compute(self):
        assert compute_turnover_tax([trade_row()]).total_tax_payable == Decimal("15000")


class TestVATCalculator:
    """Tests for VAT computation."""

    @pytest.fixture
    def calculator(self):
        """Create VAT calculator instance."""
        return VATCalculator()

    def test_vat_exclusive(self, calculator):
        result = calculator.compute_vat(Decimal("100000"))

        assert isinstance(result, VATComputation)
        assert result.vat_rate_percent == Decimal("20")
        assert result.vat_amount == Decimal("20000.00")
        assert result.gross_amount == Decimal("120000.00")
        assert result.net_amount == Decimal("100000")

    def test_vat_inclusive(self, calculator):
        result = calculator.compute_vat(Decimal("120000"), is_inclusive=True)

        assert result.net_amount == Decimal("100000.00")
        assert result.vat_amount == Decimal("20000.00")
        assert result.gross_amount == Decimal("120000")

    def test_vat_inclusive_rounding(self, calculator):
        result = calculator.compute_vat(Decimal("100"), is_inclusive=True)

        assert result.net_amount == Decimal("83.33")
        assert result.net_amount + result.vat_amount == Decimal("100")

    def test_zero_rate(self, calculator):
        result = calculator.compute_vat(Decimal("50000"), rate_percent=0)

        assert result.vat_amount == 0
        assert result.gross_amount == Decimal("50000")

    def test_unsupported_rate_rejected(self, calculator):
        with pytest.raises(InvalidInputError):
            calculator.compute_vat(Decimal("50000"), rate_percent=12)

    def test_negative_amount_rejected(self, calculator):
        with pytest.raises(InvalidInputError):
            calculator.compute_vat(Decimal("-1"))
