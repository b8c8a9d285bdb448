"""
Profit Tax Statement Module

Evaluates the 79-row annual profit tax return. Rows form a dependency
graph declared in profit_tax_rows.yaml; derived rows are computed in a
topological order fixed when the statement is built.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

from common.errors import InvalidInputError, StatementLayoutError
from common.money import money_float, require_non_negative

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ROW_COUNT = 79


class RowKind(Enum):
    """Row role in the statement."""
    INPUT = "input"
    SUBTOTAL = "subtotal"
    COMPUTED = "computed"


FORMULAS = ("sum", "difference", "rate", "negative_part")


@dataclass(frozen=True)
class TaxStatementRow:
    """Statement row or expense detail line.

    Main rows have an integer code "1".."79"; detail lines use codes like
    "33.1" and feed a subtotal row.
    """

    code: str
    label: str
    kind: RowKind
    depends_on: tuple[str, ...] = ()
    formula: str | None = None
    rate_key: str | None = None
    section: str = ""
    category: str = ""
    label_en: str = ""
    detail_of: int | None = None

    @property
    def number(self) -> int | None:
        """Row number, or None for detail lines."""
        return int(self.code) if self.code.isdigit() else None

    @property
    def is_derived(self) -> bool:
        return self.kind != RowKind.INPUT

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "number": self.number,
            "label": self.label,
            "label_en": self.label_en,
            "kind": self.kind.value,
            "depends_on": list(self.depends_on),
            "formula": self.formula,
            "section": self.section,
            "category": self.category,
            "detail_of": self.detail_of,
        }


@dataclass
class StatementResult:
    """Evaluated statement."""

    values: dict[str, Decimal] = field(default_factory=dict)
    ignored_inputs: list[str] = field(default_factory=list)

    @property
    def rows(self) -> dict[int, Decimal]:
        """Values of rows 1..79 keyed by row number."""
        return {int(code): value for code, value in self.values.items() if code.isdigit()}

    @property
    def details(self) -> dict[str, Decimal]:
        """Values of expense detail lines keyed by code."""
        return {code: value for code, value in self.values.items() if not code.isdigit()}

    def row(self, number: int) -> Decimal:
        return self.values[str(number)]

    def summary(self) -> dict[str, Decimal]:
        """Named totals of the return."""
        return {
            "total_incomes": self.row(24),
            "total_expenses": self.row(45),
            "total_losses": self.row(50),
            "total_reductions": self.row(66),
            "total_costs_and_reductions": self.row(67),
            "taxable_profit": self.row(68),
            "adjusted_taxable_profit": self.row(70),
            "calculated_profit_tax": self.row(71),
            "final_profit_tax": self.row(74),
            "tax_after_prepayments": self.row(76),
            "payable_profit_tax": self.row(78),
            "transferable_tax": self.row(79),
        }

    def to_dict(self) -> dict:
        return {
            "rows": {str(number): money_float(value) for number, value in sorted(self.rows.items())},
            "details": {code: money_float(value) for code, value in self.details.items()},
            "summary": {name: money_float(value) for name, value in self.summary().items()},
            "ignored_inputs": self.ignored_inputs,
        }


def normalize_row_key(key: Any) -> str:
    """Turn 24, "24", 33.1 or "33.1" into a row code."""
    if isinstance(key, bool):
        raise InvalidInputError(f"Invalid row key: {key!r}")
    if isinstance(key, int):
        return str(key)
    if isinstance(key, float):
        return str(int(key)) if key.is_integer() else str(key)
    if isinstance(key, str):
        return key.strip()
    raise InvalidInputError(f"Invalid row key: {key!r}")


class ProfitTaxStatement:
    """Profit tax return evaluator."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize statement layout and rates.

        Args:
            config_dir: Directory containing profit_tax_rows.yaml and tax_rules.yaml
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self._load_rules()
        self._load_layout()
        self.evaluation_order = self._resolve_order()

    def _load_rules(self) -> None:
        """Load tax rates from YAML configuration."""
        rules_file = self.config_dir / "tax_rules.yaml"
        if rules_file.exists():
            with open(rules_file) as f:
                rules = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Tax rules not found: {rules_file}, using defaults")
            rules = {}

        self.rates = {
            "profit_tax": Decimal(str(rules.get("profit_tax", {}).get("rate", "0.18"))),
        }

    def _load_layout(self) -> None:
        """Load and validate the row layout."""
        layout_file = self.config_dir / "profit_tax_rows.yaml"
        if not layout_file.exists():
            raise StatementLayoutError(f"Statement layout not found: {layout_file}")

        with open(layout_file) as f:
            layout = yaml.safe_load(f) or {}

        self.rows: dict[str, TaxStatementRow] = {}
        for row_data in layout.get("rows", []):
            row = self._build_row(row_data)
            if row.code in self.rows:
                raise StatementLayoutError(f"Duplicate row {row.code}")
            self.rows[row.code] = row

        self._validate_layout()

    def _build_row(self, row_data: dict) -> TaxStatementRow:
        code = normalize_row_key(row_data.get("number", row_data.get("code")))

        try:
            kind = RowKind(row_data.get("kind", "input"))
        except ValueError:
            raise StatementLayoutError(f"Row {code}: unknown kind {row_data.get('kind')!r}")

        depends_on = [normalize_row_key(d) for d in row_data.get("depends_on", [])]
        if "range" in row_data:
            first, last = row_data["range"]
            depends_on.extend(str(n) for n in range(first, last + 1))

        return TaxStatementRow(
            code=code,
            label=row_data.get("label", ""),
            label_en=row_data.get("label_en", ""),
            kind=kind,
            depends_on=tuple(depends_on),
            formula=row_data.get("formula"),
            rate_key=row_data.get("rate"),
            section=row_data.get("section", ""),
            category=row_data.get("category", ""),
            detail_of=row_data.get("detail_of"),
        )

    def _validate_layout(self) -> None:
        """Check the layout is complete and every reference resolves."""
        expected = {str(n) for n in range(1, ROW_COUNT + 1)}
        numbered = {code for code in self.rows if code.isdigit()}
        if numbered != expected:
            missing = sorted(expected - numbered, key=int)
            extra = sorted(numbered - expected, key=int)
            raise StatementLayoutError(f"Rows must be 1..{ROW_COUNT}; missing {missing}, extra {extra}")

        for row in self.rows.values():
            if row.kind == RowKind.INPUT:
                if row.depends_on or row.formula:
                    raise StatementLayoutError(f"Input row {row.code} cannot have a formula")
                continue

            if row.formula not in FORMULAS:
                raise StatementLayoutError(f"Row {row.code}: unknown formula {row.formula!r}")
            if not row.depends_on:
                raise StatementLayoutError(f"Row {row.code}: derived row without dependencies")
            if row.formula in ("rate", "negative_part") and len(row.depends_on) != 1:
                raise StatementLayoutError(f"Row {row.code}: {row.formula} takes one dependency")
            if row.formula == "rate" and row.rate_key not in self.rates:
                raise StatementLayoutError(f"Row {row.code}: unknown rate {row.rate_key!r}")

            for dependency in row.depends_on:
                if dependency not in self.rows:
                    raise StatementLayoutError(f"Row {row.code} references unknown row {dependency}")

    def _resolve_order(self) -> list[str]:
        """Topological order of all rows, dependencies first.

        Ties keep the declared layout order.
        """
        order: list[str] = []
        state: dict[str, str] = {}  # code -> 'visiting' | 'done'

        def visit(code: str, path: list[str]) -> None:
            if state.get(code) == "done":
                return
            if state.get(code) == "visiting":
                cycle = " -> ".join(path + [code])
                raise StatementLayoutError(f"Circular row dependency: {cycle}")

            state[code] = "visiting"
            for dependency in self.rows[code].depends_on:
                visit(dependency, path + [code])
            state[code] = "done"
            order.append(code)

        for code in self.rows:
            visit(code, [])

        return order

    # ==================== Evaluation ====================

    def _clean_inputs(self, inputs: Mapping[Any, Any]) -> tuple[dict[str, Decimal], list[str]]:
        """Validate caller values; drop values for derived rows."""
        values: dict[str, Decimal] = {}
        ignored: list[str] = []

        for key, raw_value in inputs.items():
            code = normalize_row_key(key)
            row = self.rows.get(code)
            if row is None:
                raise InvalidInputError(f"Unknown statement row: {key!r}")
            if row.is_derived:
                ignored.append(code)
                continue
            values[code] = require_non_negative(raw_value, f"row {code}")

        if ignored:
            logger.warning(f"Ignoring values supplied for derived rows: {', '.join(ignored)}")

        return values, ignored

    def _apply(self, row: TaxStatementRow, values: dict[str, Decimal]) -> Decimal:
        operands = [values[code] for code in row.depends_on]

        if row.formula == "sum":
            return sum(operands, ZERO)
        elif row.formula == "difference":
            return operands[0] - sum(operands[1:], ZERO)
        elif row.formula == "rate":
            return operands[0] * self.rates[row.rate_key]
        # negative_part
        return operands[0] if operands[0] < 0 else ZERO

    def evaluate(self, inputs: Mapping[Any, Any] | None = None) -> StatementResult:
        """Evaluate the statement.

        Args:
            inputs: Values of input rows keyed by row number or detail code;
                missing rows count as zero

        Returns:
            StatementResult with every row and detail line
        """
        supplied, ignored = self._clean_inputs(inputs or {})

        values: dict[str, Decimal] = {}
        for code in self.evaluation_order:
            row = self.rows[code]
            if row.kind == RowKind.INPUT:
                values[code] = supplied.get(code, ZERO)
            else:
                values[code] = self._apply(row, values)

        logger.debug(f"Profit statement evaluated: payable tax {values['78']}")
        return StatementResult(values=values, ignored_inputs=ignored)

    def layout(self) -> list[TaxStatementRow]:
        """Rows in declared (form) order."""
        return list(self.rows.values())

    def input_rows(self) -> list[TaxStatementRow]:
        return [row for row in self.layout() if row.kind == RowKind.INPUT]


profit_tax_statement = ProfitTaxStatement()


def evaluate_profit_statement(inputs: Mapping[Any, Any]) -> dict[int, Decimal]:
    """Evaluate rows 1..79 with the default layout."""
    return profit_tax_statement.evaluate(inputs).rows
