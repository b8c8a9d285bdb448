"""
Calculator Registry Module

Read-only catalog of the calculators offered on the site.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculatorInfo:
    """Catalog entry."""

    slug: str
    title: str
    description: str = ""
    icon_name: str = "Calculator"
    category: str = ""
    tags: tuple[str, ...] = ()
    sort_order: int = 0
    visible: bool = True
    endpoint: str | None = None

    def matches(self, query: str) -> bool:
        """Case-insensitive match on title, description or any tag."""
        query = query.lower()
        return (
            query in self.title.lower()
            or query in self.description.lower()
            or any(query in tag.lower() for tag in self.tags)
        )

    def to_dict(self) -> dict:
        return {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "icon_name": self.icon_name,
            "category": self.category,
            "tags": list(self.tags),
            "sort_order": self.sort_order,
            "visible": self.visible,
            "endpoint": self.endpoint,
        }


class CalculatorCatalog:
    """Calculator catalog loaded from calculators.yaml."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize the catalog.

        Args:
            config_dir: Directory containing calculators.yaml
        """
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).parent
        self._load_config()

    def _load_config(self) -> None:
        """Load catalog entries from YAML."""
        config_file = self.config_dir / "calculators.yaml"
        if config_file.exists():
            with open(config_file) as f:
                self.config = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Calculator catalog not found: {config_file}")
            self.config = {}

        self.calculators = [
            CalculatorInfo(
                slug=item["slug"],
                title=item.get("title", item["slug"]),
                description=item.get("description", ""),
                icon_name=item.get("icon_name", "Calculator"),
                category=item.get("category", ""),
                tags=tuple(item.get("tags", [])),
                sort_order=item.get("sort_order", 0),
                visible=item.get("visible", True),
                endpoint=item.get("endpoint"),
            )
            for item in self.config.get("calculators", [])
        ]

    def get_by_slug(self, slug: str) -> CalculatorInfo | None:
        """Visible calculator with the given slug."""
        for calculator in self.calculators:
            if calculator.slug == slug and calculator.visible:
                return calculator
        return None

    def visible(self) -> list[CalculatorInfo]:
        """Visible calculators by sort order."""
        return sorted(
            (c for c in self.calculators if c.visible),
            key=lambda c: c.sort_order,
        )

    def by_category(self, category: str) -> list[CalculatorInfo]:
        return [c for c in self.visible() if c.category == category]

    def search(self, query: str) -> list[CalculatorInfo]:
        return [c for c in self.visible() if c.matches(query)]


calculator_catalog = CalculatorCatalog()
