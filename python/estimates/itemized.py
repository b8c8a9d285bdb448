"""
Itemized Estimate Module

Bill-of-quantities estimate: materials, labor hours and other line items
priced by quantity, plus VAT and a profit margin on the subtotal.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

import yaml

from common.money import money_float, require_non_negative

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EstimateItem:
    """Single estimate line."""

    name: str
    quantity: Decimal
    unit_price: Decimal

    def __post_init__(self):
        object.__setattr__(self, "quantity", require_non_negative(self.quantity, "quantity"))
        object.__setattr__(self, "unit_price", require_non_negative(self.unit_price, "unit_price"))

    @property
    def total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass
class ItemizedEstimate:
    """Priced itemized estimate."""

    items: list[EstimateItem] = field(default_factory=list)
    vat_percent: Decimal = Decimal("20")
    margin_percent: Decimal = Decimal("10")
    subtotal: Decimal = Decimal("0")
    vat_amount: Decimal = Decimal("0")
    profit_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    def calculate_totals(self) -> None:
        """Recalculate totals from items."""
        self.subtotal = sum((item.total for item in self.items), Decimal("0"))
        self.vat_amount = self.subtotal * self.vat_percent / 100
        self.profit_amount = self.subtotal * self.margin_percent / 100
        self.total = self.subtotal + self.vat_amount + self.profit_amount

    def to_dict(self) -> dict:
        return {
            "items": [
                {
                    "name": item.name,
                    "quantity": float(item.quantity),
                    "unit_price": money_float(item.unit_price),
                    "total": money_float(item.total),
                }
                for item in self.items
            ],
            "vat_percent": float(self.vat_percent),
            "margin_percent": float(self.margin_percent),
            "subtotal": money_float(self.subtotal),
            "vat_amount": money_float(self.vat_amount),
            "profit_amount": money_float(self.profit_amount),
            "total": money_float(self.total),
        }


class ItemizedEstimator:
    """Builds itemized estimates with configured default VAT and margin."""

    def __init__(self, config_dir: Path | str | None = None):
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self._load_rules()

    def _load_rules(self) -> None:
        rules_file = self.config_dir / "estimate_rules.yaml"
        if rules_file.exists():
            with open(rules_file) as f:
                rules = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Estimate rules not found: {rules_file}, using defaults")
            rules = {}

        itemized = rules.get("itemized", {})
        self.default_vat_percent = Decimal(str(itemized.get("default_vat_percent", 20)))
        self.default_margin_percent = Decimal(str(itemized.get("default_margin_percent", 10)))

    def create_estimate(
        self,
        items: list[dict],
        vat_percent: Decimal | None = None,
        margin_percent: Decimal | None = None
    ) -> ItemizedEstimate:
        """Create an estimate with calculated totals.

        Args:
            items: List of item dicts with 'name', 'quantity', 'unit_price'
            vat_percent: VAT percent, configured default when None
            margin_percent: Profit margin percent, configured default when None

        Returns:
            ItemizedEstimate with calculated totals
        """
        estimate = ItemizedEstimate(
            items=[
                EstimateItem(
                    name=item_data.get("name", ""),
                    quantity=item_data.get("quantity", 1),
                    unit_price=item_data.get("unit_price", 0),
                )
                for item_data in items
            ],
            vat_percent=require_non_negative(
                self.default_vat_percent if vat_percent is None else vat_percent, "vat_percent"
            ),
            margin_percent=require_non_negative(
                self.default_margin_percent if margin_percent is None else margin_percent,
                "margin_percent",
            ),
        )
        estimate.calculate_totals()
        return estimate
