"""REST endpoints for practice and comprehensive tax calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from praxistax.backend.services import (
    build_calculation_response,
    calculate_comprehensive,
    calculate_practice,
    compare_practice_scenarios,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1/calculations")


@blueprint.post("/practice")
def create_practice_calculation() -> tuple[Any, int]:
    """Calculate the annual burden of a single practice."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_practice(payload))


@blueprint.post("/comprehensive")
def create_comprehensive_calculation() -> tuple[Any, int]:
    """Calculate the combined assessment for salary and practice income."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_comprehensive(payload))


@blueprint.post("/compare")
def create_scenario_comparison() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    return build_calculation_response(compare_practice_scenarios(payload))
