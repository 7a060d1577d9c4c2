"""Tests for scenario and year comparisons."""

from __future__ import annotations

import pytest

from praxistax.backend.app.models import TaxCalculationInput
from praxistax.backend.config.year_config import YearConfiguration
from praxistax.backend.services.calculators import (
    calculate_austrian_tax,
    compare_scenarios,
    compare_years,
)


def _result(config: YearConfiguration, revenue: float, expenses: float, **extra):
    return calculate_austrian_tax(
        TaxCalculationInput(
            gross_revenue=revenue,
            total_expenses=expenses,
            practice_type=extra.pop("practice_type", "kassenarzt"),
            **extra,
        ),
        config,
    )


def test_compare_scenarios_ranks_by_net_income(config_2024: YearConfiguration) -> None:
    results = {
        "baseline": _result(config_2024, 100_000, 40_000),
        "flat_rate": _result(config_2024, 100_000, 40_000, applying_pauschalierung=True),
        "expansion": _result(config_2024, 150_000, 120_000),
    }

    comparison = compare_scenarios(results)

    assert comparison.best == "flat_rate"
    assert comparison.worst == "expansion"
    assert comparison.metrics["net_income"]["baseline"] == pytest.approx(25_526.3)
    assert set(comparison.metrics["income_tax"]) == set(results)


def test_compare_scenarios_with_no_results() -> None:
    comparison = compare_scenarios({})

    assert comparison.best is None
    assert comparison.worst is None


def test_compare_years_reports_headline_parameters() -> None:
    comparison = compare_years(2024, 2025)

    assert comparison.changes["tax_free_threshold"] == {2024: 12_816, 2025: 13_308}
    assert comparison.changes["max_assessment_base"] == {2024: 88_200, 2025: 90_000}
    assert comparison.changes["commuter_credit"][2025] == 421
    assert comparison.changes["pension_contribution_max"] == {2024: 3_000, 2025: 3_100}


def test_compare_years_requires_configured_years() -> None:
    with pytest.raises(FileNotFoundError):
        compare_years(2024, 1999)
