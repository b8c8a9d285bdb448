"""
VAT Calculator Module

Computes Armenian VAT from a net (VAT-exclusive) amount or extracts it
from a gross (VAT-inclusive) amount.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import yaml

from common.errors import InvalidInputError
from common.money import money_float, quantize_money, require_non_negative, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VATComputation:
    """VAT computation result."""

    net_amount: Decimal  # Amount before VAT
    vat_rate_percent: Decimal
    vat_amount: Decimal
    gross_amount: Decimal  # Amount including VAT
    is_inclusive: bool = False  # Whether input was VAT-inclusive

    def to_dict(self) -> dict:
        return {
            "net_amount": money_float(self.net_amount),
            "vat_rate_percent": float(self.vat_rate_percent),
            "vat_amount": money_float(self.vat_amount),
            "gross_amount": money_float(self.gross_amount),
            "is_inclusive": self.is_inclusive,
        }


class VATCalculator:
    """Armenian VAT calculator."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize calculator with VAT rates.

        Args:
            config_dir: Directory containing tax_rules.yaml
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self._load_rules()

    def _load_rules(self) -> None:
        """Load VAT rates from YAML configuration."""
        rules_file = self.config_dir / "tax_rules.yaml"
        if rules_file.exists():
            with open(rules_file) as f:
                rules = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Tax rules not found: {rules_file}, using defaults")
            rules = {}

        vat = rules.get("vat", {})
        self.default_rate = Decimal(str(vat.get("default_rate", 20)))
        self.rates = [Decimal(str(r)) for r in vat.get("rates", [20, 0])]

    def compute_vat(
        self,
        amount: Decimal,
        is_inclusive: bool = False,
        rate_percent: Decimal | None = None
    ) -> VATComputation:
        """Compute VAT for an amount.

        Args:
            amount: Net amount, or gross amount when is_inclusive
            is_inclusive: Whether amount already includes VAT
            rate_percent: One of the configured rates; default rate when None

        Returns:
            VATComputation result
        """
        amount = require_non_negative(amount, "amount")
        rate = self.default_rate if rate_percent is None else to_decimal(rate_percent, "rate_percent")
        if rate not in self.rates:
            raise InvalidInputError(
                f"Unsupported VAT rate {rate}%. Use one of {[float(r) for r in self.rates]}"
            )

        if is_inclusive:
            # VAT-inclusive: amount / 1.20
            net_amount = quantize_money(amount / (1 + rate / 100))
            vat_amount = amount - net_amount
            gross_amount = amount
        else:
            net_amount = amount
            vat_amount = quantize_money(amount * rate / 100)
            gross_amount = amount + vat_amount

        return VATComputation(
            net_amount=net_amount,
            vat_rate_percent=rate,
            vat_amount=vat_amount,
            gross_amount=gross_amount,
            is_inclusive=is_inclusive,
        )
