"""
Pytest configuration and fixtures for calculator tests.
"""

import shutil
import sys
from pathlib import Path

import pytest
import yaml

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent
PYTHON_DIR = PROJECT_ROOT / "python"

sys.path.insert(0, str(PYTHON_DIR))


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def python_dir() -> Path:
    """Return the source directory."""
    return PYTHON_DIR


@pytest.fixture
def tax_config_dir(tmp_path: Path) -> Path:
    """Copy of the tax package YAML files that a test may edit."""
    config_dir = tmp_path / "tax_config"
    config_dir.mkdir()
    for name in ("tax_rules.yaml", "profit_tax_rows.yaml"):
        shutil.copy(PYTHON_DIR / "tax" / name, config_dir / name)
    return config_dir


@pytest.fixture
def profit_layout(tax_config_dir: Path) -> dict:
    """Default statement layout as a dict."""
    with open(tax_config_dir / "profit_tax_rows.yaml") as f:
        return yaml.safe_load(f)


@pytest.fixture
def write_yaml():
    """Write a dict as YAML to a path."""
    def _write(path: Path, data: dict) -> Path:
        with open(path, "w") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
        return path
    return _write


@pytest.fixture
def sample_positions() -> list[dict]:
    """Return sample salary positions as decoded JSON."""
    return [
        {"kind": "hourly", "hourly_rate": 2000, "hours_per_day": 8, "days_per_month": 22},
        {"kind": "daily", "daily_rate": 15000, "days_per_month": 22},
        {"kind": "monthly", "monthly_salary": 0},
    ]
