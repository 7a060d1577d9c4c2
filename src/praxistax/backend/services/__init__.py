"""Service-layer helpers for the PraxisTax backend."""

from .calculation_service import (
    calculate_comprehensive,
    calculate_practice,
    compare_practice_scenarios,
)
from .request_parser import parse_calculation_payload, resolve_request_locale
from .response_builder import build_calculation_response

__all__ = [
    "build_calculation_response",
    "calculate_comprehensive",
    "calculate_practice",
    "compare_practice_scenarios",
    "parse_calculation_payload",
    "resolve_request_locale",
]
