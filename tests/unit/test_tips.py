"""Tests for the optimisation tip rule tables."""

from __future__ import annotations

import pytest

from praxistax.backend.app.models import TaxCalculationInput
from praxistax.backend.config.year_config import YearConfiguration
from praxistax.backend.services.calculators import (
    calculate_austrian_tax,
    evaluate_tip_rules,
    get_tax_optimization_tips,
)
from praxistax.backend.services.calculators.tips import PRACTICE_TIP_RULES


def _result(config: YearConfiguration, **overrides):
    data = {
        "gross_revenue": 100_000,
        "total_expenses": 40_000,
        "practice_type": "kassenarzt",
    }
    data.update(overrides)
    return calculate_austrian_tax(TaxCalculationInput(**data), config)


def _ids(result, config) -> list[str]:
    return [tip.id for tip in evaluate_tip_rules(result, config)]


def test_rules_are_evaluated_in_declaration_order() -> None:
    assert [rule.id for rule in PRACTICE_TIP_RULES] == [
        "high_effective_rate",
        "pauschalierung",
        "high_social_security",
        "strong_net_income",
        "low_profit",
        "small_business_threshold",
    ]


def test_typical_practice_gets_rate_and_flat_rate_tips(config_2024: YearConfiguration) -> None:
    result = _result(config_2024)

    tips = get_tax_optimization_tips(result, config_2024)

    assert len(tips) == 2
    assert tips[0].startswith("Ihr effektiver Steuersatz ist über 45%")
    assert "13% Pauschalierung" in tips[1]
    assert "€ 7.800" in tips[1]


def test_flat_rate_tip_reports_tax_savings(config_2024: YearConfiguration) -> None:
    tips = evaluate_tip_rules(_result(config_2024), config_2024)

    flat_rate = next(tip for tip in tips if tip.id == "pauschalierung")
    assert flat_rate.type == "tip"
    assert flat_rate.potential_savings == pytest.approx(3_120)


def test_flat_rate_tip_disappears_once_applied(config_2024: YearConfiguration) -> None:
    result = _result(config_2024, applying_pauschalierung=True)

    assert "pauschalierung" not in _ids(result, config_2024)


def test_flat_rate_tip_requires_revenue_below_ceiling(config_2024: YearConfiguration) -> None:
    result = _result(config_2024, gross_revenue=400_000, total_expenses=100_000)

    assert _ids(result, config_2024) == ["high_effective_rate", "strong_net_income"]
    assert any("Glückwunsch" in tip for tip in get_tax_optimization_tips(result, config_2024))


def test_loss_year_only_warns_about_low_profit(config_2024: YearConfiguration) -> None:
    result = _result(config_2024, gross_revenue=30_000, total_expenses=40_000)

    assert _ids(result, config_2024) == ["low_profit"]


def test_high_social_security_share(config_2024: YearConfiguration) -> None:
    # Minimum contributions dominate a small profit.
    result = _result(config_2024, gross_revenue=30_000, total_expenses=15_000)

    assert "high_social_security" in _ids(result, config_2024)


def test_approaching_small_business_threshold(config_2024: YearConfiguration) -> None:
    result = _result(
        config_2024, gross_revenue=30_000, total_expenses=5_000, practice_type="wahlarzt"
    )

    assert _ids(result, config_2024) == ["pauschalierung", "small_business_threshold"]
    assert "€ 35.000" in get_tax_optimization_tips(result, config_2024)[-1]


def test_kassenarzt_never_gets_the_small_business_tip(config_2024: YearConfiguration) -> None:
    result = _result(config_2024, gross_revenue=30_000, total_expenses=5_000)

    assert "small_business_threshold" not in _ids(result, config_2024)


def test_tips_are_localized(config_2024: YearConfiguration) -> None:
    tips = get_tax_optimization_tips(_result(config_2024), config_2024, locale="en")

    assert tips[0].startswith("Your effective tax rate is above 45%")


def test_config_defaults_to_the_result_year(config_2024: YearConfiguration) -> None:
    result = _result(config_2024)

    assert get_tax_optimization_tips(result) == get_tax_optimization_tips(result, config_2024)
