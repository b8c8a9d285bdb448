"""
Tests for API Routes

Exercises the FastAPI endpoints end to end with the test client.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "python"))

from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture
def client():
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


class TestServiceEndpoints:
    """Tests for root and health endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root_lists_calculators(self, client):
        response = client.get("/")

        assert response.status_code == 200
        calculators = {c["slug"]: c["endpoint"] for c in response.json()["calculators"]}
        assert calculators["vat"] == "/api/tax/vat"
        assert "benefit" not in calculators


class TestPayrollRoutes:
    """Tests for salary conversion endpoints."""

    def test_gross_to_net(self, client):
        response = client.post("/api/payroll/convert", json={"amount": 300000})

        assert response.status_code == 200
        data = response.json()
        assert data["net"] == 219500.0
        assert data["total_deductions"] == 80500.0
        assert data["direction"] == "grossToNet"

    def test_net_to_gross(self, client):
        response = client.post(
            "/api/payroll/convert",
            json={"amount": 219500, "direction": "netToGross"},
        )

        assert response.status_code == 200
        assert response.json()["gross"] == 300000.0

    def test_negative_amount(self, client):
        response = client.post("/api/payroll/convert", json={"amount": -5})
        assert response.status_code == 400

    def test_oversized_amount(self, client):
        response = client.post(
            "/api/payroll/convert",
            json={"amount": 1e30, "direction": "netToGross"},
        )
        assert response.status_code == 400

    def test_unknown_direction(self, client):
        response = client.post("/api/payroll/convert", json={"amount": 5, "direction": "up"})
        assert response.status_code == 400

    def test_rules(self, client):
        response = client.get("/api/payroll/rules")

        assert response.status_code == 200
        assert len(response.json()["stamp_duty"]) == 5


class TestEstimateRoutes:
    """Tests for estimate endpoints."""

    @pytest.fixture
    def payload(self):
        return {"positions": [{"kind": "monthly", "monthly_salary": 300000}]}

    def test_additive(self, client, payload):
        response = client.post("/api/estimates/project", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["strategy"] == "additive"
        assert data["service_value"] == 470256.0

    def test_divisive(self, client, payload):
        response = client.post("/api/estimates/project?strategy=divisive", json=payload)

        assert response.status_code == 200
        assert response.json()["service_value"] == 505000.0

    def test_unknown_strategy(self, client, payload):
        response = client.post("/api/estimates/project?strategy=markup", json=payload)
        assert response.status_code == 400

    def test_invalid_position(self, client):
        response = client.post(
            "/api/estimates/project",
            json={"positions": [{"kind": "hourly", "hourly_rate": 1000}]},
        )
        assert response.status_code == 400

    def test_overflowing_salary_fund(self, client):
        response = client.post(
            "/api/estimates/project",
            json={"positions": [{
                "kind": "hourly",
                "hourly_rate": 1e14,
                "hours_per_day": 1e14,
                "days_per_month": 1e14,
            }]},
        )
        assert response.status_code == 400

    def test_itemized(self, client):
        response = client.post(
            "/api/estimates/itemized",
            json={"items": [{"name": "Cement", "quantity": 10, "unit_price": 10000}]},
        )

        assert response.status_code == 200
        assert response.json()["total"] == 130000.0


class TestTaxRoutes:
    """Tests for tax endpoints."""

    def test_turnover(self, client):
        response = client.post("/api/tax/turnover", json={
            "activities": [
                {"turnover": 1000000, "tax_rate_percent": 0.5, "is_fixed_rate": True},
                {
                    "turnover": 1000000,
                    "tax_rate_percent": 1.5,
                    "deduction_percent": 0.3,
                    "min_tax_percent": 0.5,
                },
            ]
        })

        assert response.status_code == 200
        data = response.json()
        assert data["total_tax_payable"] == 20000.0
        assert data["overall_tax_percent"] == 1.0

    def test_turnover_missing_deduction(self, client):
        response = client.post("/api/tax/turnover", json={
            "activities": [{"turnover": 1000, "tax_rate_percent": 1.5}]
        })
        assert response.status_code == 400

    def test_turnover_defaults(self, client):
        response = client.get("/api/tax/turnover/defaults")

        assert response.status_code == 200
        assert len(response.json()) == 11

    def test_profit_statement(self, client):
        response = client.post("/api/tax/profit-statement", json={"inputs": {"1": 1000000}})

        assert response.status_code == 200
        data = response.json()
        assert data["rows"]["71"] == 180000.0
        assert data["summary"]["transferable_tax"] == 0.0

    def test_profit_statement_unknown_row(self, client):
        response = client.post("/api/tax/profit-statement", json={"inputs": {"99": 1}})
        assert response.status_code == 400

    def test_profit_statement_layout(self, client):
        response = client.get("/api/tax/profit-statement/layout")

        assert response.status_code == 200
        assert len(response.json()) == 89

    def test_vat(self, client):
        response = client.post("/api/tax/vat", json={"amount": 100000})

        assert response.status_code == 200
        assert response.json()["gross_amount"] == 120000.0

    def test_vat_unsupported_rate(self, client):
        response = client.post("/api/tax/vat", json={"amount": 100000, "rate_percent": 12})
        assert response.status_code == 400


class TestCatalogRoutes:
    """Tests for calculator catalog endpoints."""

    def test_list(self, client):
        response = client.get("/api/calculators")

        assert response.status_code == 200
        assert len(response.json()) == 9

    def test_list_by_category(self, client):
        response = client.get("/api/calculators", params={"category": "tax"})

        assert response.status_code == 200
        assert all(c["category"] == "tax" for c in response.json())

    def test_get(self, client):
        response = client.get("/api/calculators/vat")

        assert response.status_code == 200
        assert response.json()["slug"] == "vat"

    def test_get_unknown(self, client):
        assert client.get("/api/calculators/mortgage").status_code == 404
