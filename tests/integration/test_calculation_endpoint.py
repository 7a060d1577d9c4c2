"""Integration tests for the tax calculation REST endpoints."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient

PRACTICE_PAYLOAD = {
    "year": 2024,
    "gross_revenue": 100_000,
    "total_expenses": 40_000,
    "practice_type": "kassenarzt",
}


def test_practice_endpoint_returns_summary_and_tips(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations/practice", json=PRACTICE_PAYLOAD)

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()
    assert result["summary"]["income_tax"] == pytest.approx(15_903.7)
    assert result["summary"]["net_income"] == pytest.approx(25_526.3)
    assert result["quarterly"]["q1"] == pytest.approx(3_975.93)
    assert [tip["id"] for tip in result["tips"]] == ["high_effective_rate", "pauschalierung"]
    assert result["meta"]["locale"] == "de"


def test_practice_endpoint_uses_accept_language_header(client: FlaskClient) -> None:
    """Accept-Language header should influence locale if body omits it."""

    response = client.post(
        "/api/v1/calculations/practice",
        json=PRACTICE_PAYLOAD,
        headers={"Accept-Language": "en-US,en;q=0.8"},
    )

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()
    assert result["meta"]["locale"] == "en"
    assert result["summary"]["labels"]["income_tax"] == "Income tax"
    assert result["tips"][0]["message"].startswith("Your effective tax rate")


def test_practice_endpoint_preserves_umlauts(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/practice",
        json={**PRACTICE_PAYLOAD, "gross_revenue": 400_000, "total_expenses": 100_000},
    )

    assert response.status_code == HTTPStatus.OK
    assert "Glückwunsch".encode("utf-8") in response.data


def test_practice_endpoint_rejects_invalid_payload(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/practice",
        json={**PRACTICE_PAYLOAD, "gross_revenue": -10},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "gross_revenue" in payload["message"]


def test_practice_endpoint_rejects_unsupported_year(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/practice", json={**PRACTICE_PAYLOAD, "year": 1999}
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "Unsupported tax year 1999" in response.get_json()["message"]


def test_calculation_endpoint_rejects_malformed_json(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/practice",
        data="{not json",
        content_type="application/json",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "bad_request"


def test_calculation_endpoint_rejects_arrays(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations/comprehensive", json=[1, 2, 3])

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json() == {
        "error": "bad_request",
        "message": "Request JSON must be an object",
    }


def test_comprehensive_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/comprehensive",
        json={"year": 2024, "employment": {"gross_salary": 60_000}, "locale": "en"},
    )

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()
    assert result["social_security"]["employee_total"] == pytest.approx(10_872)
    assert result["summary"]["effective_tax_rate"] == pytest.approx(19.17)
    assert result["summary"]["marginal_tax_rate"] == 40
    assert result["meta"]["locale"] == "en"


def test_compare_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/compare",
        json={
            "scenarios": {
                "kasse": {
                    "gross_revenue": 100_000,
                    "total_expenses": 40_000,
                    "practice_type": "kassenarzt",
                },
                "flat_rate": {
                    "gross_revenue": 100_000,
                    "total_expenses": 40_000,
                    "practice_type": "kassenarzt",
                    "applying_pauschalierung": True,
                },
            }
        },
    )

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()
    assert result["best"] == "flat_rate"
    assert result["worst"] == "kasse"


def test_practice_endpoint_handles_extreme_revenue(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/practice",
        json={"gross_revenue": 1e30, "total_expenses": 0, "practice_type": "kassenarzt"},
    )

    assert response.status_code == HTTPStatus.OK
    result = response.get_json()
    assert result["summary"]["profit"] == pytest.approx(1e30)
    assert result["quarterly"]["q1"] == pytest.approx(result["summary"]["income_tax"] / 4)


def test_practice_endpoint_rejects_non_finite_numbers(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations/practice",
        data='{"gross_revenue": Infinity, "total_expenses": 0, "practice_type": "kassenarzt"}',
        content_type="application/json",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "gross_revenue" in payload["message"]
