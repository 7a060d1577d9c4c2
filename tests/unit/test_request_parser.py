"""Unit tests for calculation request parsing helpers."""

from __future__ import annotations

import pytest
from flask import Flask, request
from werkzeug.exceptions import BadRequest

from praxistax.backend.services.request_parser import (
    parse_calculation_payload,
    resolve_request_locale,
)

PAYLOAD = {"gross_revenue": 100_000, "practice_type": "kassenarzt"}


def test_parse_payload_uses_accept_language(app: Flask) -> None:
    """Accept-Language header should supply the locale when absent."""

    with app.test_request_context(
        "/api/v1/calculations/practice",
        method="POST",
        json=PAYLOAD,
        headers={"Accept-Language": "en-GB,en;q=0.9,de;q=0.8"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "en"


def test_query_parameter_beats_header(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/practice?locale=de",
        method="POST",
        json=PAYLOAD,
        headers={"Accept-Language": "en"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "de"


def test_body_locale_beats_everything(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/practice?locale=de",
        method="POST",
        json={**PAYLOAD, "locale": "EN"},
        headers={"Accept-Language": "de"},
    ):
        payload = parse_calculation_payload(request)

    assert payload["locale"] == "en"


def test_no_locale_hint_leaves_payload_untouched(app: Flask) -> None:
    with app.test_request_context("/api/v1/calculations/practice", method="POST", json=PAYLOAD):
        payload = parse_calculation_payload(request)
        assert resolve_request_locale(request) is None

    assert "locale" not in payload


def test_parse_payload_rejects_non_object(app: Flask) -> None:
    """Non-object JSON payloads should trigger BadRequest responses."""

    with app.test_request_context(
        "/api/v1/calculations/practice",
        method="POST",
        json=["not", "an", "object"],
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_invalid_json(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/practice",
        method="POST",
        data="{not json",
        content_type="application/json",
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)
