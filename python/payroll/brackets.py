"""
Bracket Table Module

Ordered threshold-to-value lookup used for stamp duty.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from common.errors import InvalidInputError
from common.money import require_non_negative, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BracketEntry:
    """Single bracket: applies to amounts up to and including upper_bound."""

    upper_bound: Decimal | None  # None = unbounded
    value: Decimal

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None

    def to_dict(self) -> dict:
        return {
            "upper_bound": float(self.upper_bound) if self.upper_bound is not None else None,
            "value": float(self.value),
        }


class BracketTable:
    """Immutable, ascending list of brackets ending in one unbounded entry."""

    def __init__(self, entries: Iterable[BracketEntry]):
        self._entries = tuple(entries)
        self._validate()

    @classmethod
    def from_config(cls, brackets: list[dict[str, Any]]) -> "BracketTable":
        """Build a table from YAML bracket dicts with 'upper_bound' and 'value'."""
        entries = []
        for bracket in brackets:
            upper = bracket.get("upper_bound")
            entries.append(BracketEntry(
                upper_bound=to_decimal(upper, "upper_bound") if upper is not None else None,
                value=to_decimal(bracket.get("value"), "value"),
            ))
        return cls(entries)

    def _validate(self) -> None:
        if not self._entries:
            raise InvalidInputError("Bracket table needs at least one entry")

        unbounded = [e for e in self._entries if e.is_unbounded]
        if len(unbounded) != 1 or not self._entries[-1].is_unbounded:
            raise InvalidInputError("Bracket table needs exactly one unbounded entry, placed last")

        bounds = [e.upper_bound for e in self._entries[:-1]]
        if any(lower >= upper for lower, upper in zip(bounds, bounds[1:])):
            raise InvalidInputError(f"Bracket bounds must be strictly ascending: {bounds}")

    @property
    def entries(self) -> tuple[BracketEntry, ...]:
        return self._entries

    def lookup(self, amount: Decimal) -> BracketEntry:
        """Find the bracket for an amount.

        Args:
            amount: Non-negative amount

        Returns:
            First entry whose upper bound is >= amount, else the unbounded entry
        """
        amount = require_non_negative(amount, "amount")

        for entry in self._entries:
            if entry.is_unbounded or amount <= entry.upper_bound:
                return entry

        # _validate guarantees an unbounded last entry
        return self._entries[-1]

    def value_for(self, amount: Decimal) -> Decimal:
        """Shortcut for lookup(amount).value."""
        return self.lookup(amount).value

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"BracketTable({list(self._entries)!r})"


DEFAULT_STAMP_DUTY_BRACKETS = [
    {"upper_bound": 100000, "value": 1500},
    {"upper_bound": 200000, "value": 3000},
    {"upper_bound": 500000, "value": 5500},
    {"upper_bound": 1000000, "value": 8500},
    {"upper_bound": None, "value": 15000},
]

STAMP_DUTY_TABLE = BracketTable.from_config(DEFAULT_STAMP_DUTY_BRACKETS)
