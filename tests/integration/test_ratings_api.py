"""Integration tests for the rating API."""

from typing import Any
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


@pytest.fixture
def office_payload() -> dict[str, Any]:
    return {
        "business": {
            "name": "Acme Bookkeeping",
            "description": "Office bookkeeping services",
            "years_in_business": 1,
            "payroll_lines": [
                {
                    "state_code": "CA",
                    "class_code": "8810",
                    "annual_payroll": 100000,
                    "employee_count": 2,
                }
            ],
        },
        "effective_date": "2024-01-01",
    }


class TestRatingsAPI:
    """Test the /api/v1/ratings endpoints."""

    def test_health(self, client: TestClient):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["class_code_rates"] == 3

    def test_root(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "operational"

    def test_calculate_and_fetch(
        self, client: TestClient, office_payload: dict[str, Any]
    ):
        response = client.post("/api/v1/ratings/calculate", json=office_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["business_name"] == "Acme Bookkeeping"
        assert body["result"]["total_premium"] == pytest.approx(301.0)
        assert body["result"]["breakdowns"][0]["experience_mod"] == 0.86

        fetched = client.get(f"/api/v1/ratings/{body['rating_id']}")
        assert fetched.status_code == 200
        assert fetched.json()["result"] == body["result"]

    def test_calculate_invalid_submission(
        self, client: TestClient, office_payload: dict[str, Any]
    ):
        office_payload["business"]["payroll_lines"][0]["annual_payroll"] = 0

        response = client.post("/api/v1/ratings/calculate", json=office_payload)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["is_valid"] is False
        assert any("Invalid payroll amount" in e for e in detail["errors"])

    def test_calculate_malformed_request(self, client: TestClient):
        response = client.post(
            "/api/v1/ratings/calculate", json={"business": {"unknown": 1}}
        )

        assert response.status_code == 422

    def test_validate(self, client: TestClient, office_payload: dict[str, Any]):
        office_payload["business"]["payroll_lines"][0]["class_code"] = "4444"

        response = client.post("/api/v1/ratings/validate", json=office_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is False
        assert any("4444" in e for e in body["report"]["errors"])

    def test_calculate_with_modifiers(
        self, client: TestClient, office_payload: dict[str, Any]
    ):
        office_payload["business"]["modifiers"] = {
            "experience_mod": 1.1,
            "schedule_credit": 0.1,
            "supplemental_coverages": [
                {"id": "uslh", "selected": True, "premium": 100}
            ],
        }

        response = client.post(
            "/api/v1/ratings/calculate-with-modifiers", json=office_payload
        )

        assert response.status_code == 200
        # 350 * 1.1 * 0.9 + 100
        assert response.json()["total_premium"] == pytest.approx(446.5)

    def test_calculate_with_modifiers_requires_modifiers(
        self, client: TestClient, office_payload: dict[str, Any]
    ):
        response = client.post(
            "/api/v1/ratings/calculate-with-modifiers", json=office_payload
        )

        assert response.status_code == 400

    def test_unknown_rating(self, client: TestClient):
        response = client.get(f"/api/v1/ratings/{uuid4()}")

        assert response.status_code == 404
