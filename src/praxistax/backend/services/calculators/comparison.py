"""Side-by-side comparisons of practice scenarios and tax years."""

from __future__ import annotations

from collections.abc import Mapping

from praxistax.backend.app.models import (
    ScenarioComparison,
    TaxCalculationResult,
    YearComparison,
)
from praxistax.backend.config.year_config import load_year_configuration

from .utils import round_currency

# Result attributes reported for every compared scenario.
SCENARIO_METRICS = (
    "profit",
    "taxable_income",
    "sv_beitraege",
    "aerztekammer_beitrag",
    "income_tax",
    "vat",
    "total_tax_burden",
    "net_income",
    "effective_tax_rate",
)


def compare_scenarios(results: Mapping[str, TaxCalculationResult]) -> ScenarioComparison:
    """Tabulate ``results`` per metric and pick the best and worst by net income.

    Ties keep the scenario that was supplied first.
    """

    metrics = {
        metric: {name: round_currency(getattr(result, metric)) for name, result in results.items()}
        for metric in SCENARIO_METRICS
    }

    if not results:
        return ScenarioComparison(metrics=metrics, best=None, worst=None)

    names = list(results)
    best = max(names, key=lambda name: results[name].net_income)
    worst = min(names, key=lambda name: results[name].net_income)
    return ScenarioComparison(metrics=metrics, best=best, worst=worst)


def compare_years(year1: int, year2: int) -> YearComparison:
    """Return the headline parameters that changed between two tax years.

    Raises ``FileNotFoundError`` when either year is not configured.
    """

    first = load_year_configuration(year1)
    second = load_year_configuration(year2)

    def _parameters(config) -> dict[str, float]:
        comprehensive = config.comprehensive
        return {
            "tax_free_threshold": config.income_tax.tax_free_threshold,
            "max_assessment_base": comprehensive.social_security.employee.max_assessment_base,
            "commuter_credit": comprehensive.tax_credits.commuter_credit,
            "pension_contribution_max": comprehensive.deduction_limits.pension_contribution_max,
            "small_business_threshold": config.practice.vat.small_business_threshold,
        }

    before = _parameters(first)
    after = _parameters(second)
    changes = {key: {year1: before[key], year2: after[key]} for key in before}
    return YearComparison(year1=year1, year2=year2, changes=changes)


__all__ = ["SCENARIO_METRICS", "compare_scenarios", "compare_years"]
