"""Orchestrate request validation, year resolution and the tax calculators.

The service layer validates API payloads with the shared request models,
resolves the tax year against the manifest and turns the calculators' frozen
results into rounded, localized JSON payloads. Profiling hooks live here so
that the calculators stay pure arithmetic.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import asdict
from time import perf_counter
from typing import Any

from pydantic import BaseModel, ValidationError

from praxistax.backend.app.localization import Translator, get_translator
from praxistax.backend.app.models import (
    ComparisonRequest,
    ComparisonResponse,
    ComprehensiveCalculationRequest,
    ComprehensiveCalculationResponse,
    ComprehensiveTaxInput,
    ComprehensiveTaxResult,
    PracticeCalculationRequest,
    PracticeCalculationResponse,
    PracticeScenarioInput,
    QuarterlySplit,
    SocialSecurityBreakdown,
    TaxCalculationInput,
    TaxCalculationResult,
    TaxOptimizationTip,
    format_validation_error,
)
from praxistax.backend.config.year_config import (
    YearConfiguration,
    available_years,
    default_year,
    load_year_configuration,
)

from .calculators import (
    calculate_austrian_tax,
    calculate_comprehensive_tax,
    calculate_quarterly_vorauszahlungen,
    compare_scenarios,
    evaluate_tip_rules,
    format_percentage,
    generate_comprehensive_tips,
    round_currency,
    round_rate,
)

_LOGGER = logging.getLogger(__name__)

_PRACTICE_SUMMARY_FIELDS = (
    "gross_revenue",
    "total_expenses",
    "profit",
    "pauschal_deduction",
    "taxable_income",
    "sv_beitraege",
    "aerztekammer_beitrag",
    "income_tax",
    "vat",
    "total_tax_burden",
    "net_income",
)

_COMPREHENSIVE_SUMMARY_FIELDS = (
    "total_gross_income",
    "final_taxable_income",
    "total_income_tax",
    "total_direct_burden",
    "net_income",
    "tax_liability",
)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("PRAXISTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _log_timings(operation: str, timings: dict[str, float] | None, start: float | None) -> None:
    if timings is None or start is None:
        return
    timings["total"] = perf_counter() - start
    _LOGGER.debug(
        "%s timings (ms): %s",
        operation,
        {name: round(duration * 1000, 3) for name, duration in timings.items()},
    )


def _validate_request(model: type[BaseModel], payload: Mapping[str, Any] | BaseModel) -> Any:
    if isinstance(payload, model):
        data: Any = payload.model_dump(mode="python")
    elif isinstance(payload, Mapping):
        data = payload
    else:
        raise ValueError("Payload must be a mapping")

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _resolve_configuration(year: int | None) -> YearConfiguration:
    """Return the configuration for ``year`` or the default year."""

    if year is None:
        year = default_year()
    if year not in available_years():
        supported = ", ".join(str(entry) for entry in available_years())
        raise ValueError(f"Unsupported tax year {year}; supported years: {supported}")
    return load_year_configuration(year)


def _quarterly_payload(split: QuarterlySplit, translator: Translator) -> dict[str, Any]:
    return {
        "q1": split.q1,
        "q2": split.q2,
        "q3": split.q3,
        "q4": split.q4,
        "total": split.total,
        "labels": {
            key: translator(f"quarterly.{key}") for key in ("q1", "q2", "q3", "q4", "total")
        },
    }


def _tips_payload(tips: list[TaxOptimizationTip]) -> list[dict[str, Any]]:
    return [asdict(tip) for tip in tips]


def _practice_summary(result: TaxCalculationResult, translator: Translator) -> dict[str, Any]:
    summary: dict[str, Any] = {
        field: round_currency(getattr(result, field)) for field in _PRACTICE_SUMMARY_FIELDS
    }
    summary["effective_tax_rate"] = round_rate(result.effective_tax_rate)

    label_fields = (*_PRACTICE_SUMMARY_FIELDS, "effective_tax_rate")
    summary["labels"] = {field: translator(f"summary.{field}") for field in label_fields}
    return summary


def _scenario_input(scenario: PracticeScenarioInput) -> TaxCalculationInput:
    return TaxCalculationInput(
        gross_revenue=scenario.gross_revenue,
        total_expenses=scenario.total_expenses,
        practice_type=scenario.practice_type,
        applying_pauschalierung=scenario.applying_pauschalierung,
        private_patient_revenue=scenario.private_patient_revenue,
    )


def calculate_practice(
    payload: Mapping[str, Any] | PracticeCalculationRequest,
) -> dict[str, Any]:
    """Compute the practice result, prepayment split and tips for ``payload``."""

    request_model: PracticeCalculationRequest = _validate_request(
        PracticeCalculationRequest, payload
    )

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = _resolve_configuration(request_model.year)
    translator = get_translator(request_model.locale)

    with _profile_section("practice", timings):
        result = calculate_austrian_tax(_scenario_input(request_model), config)

    with _profile_section("quarterly", timings):
        quarterly = calculate_quarterly_vorauszahlungen(result.income_tax, precision=2)

    with _profile_section("tips", timings):
        tips = evaluate_tip_rules(result, config, translator.locale)

    _log_timings("calculate_practice", timings, overall_start)

    response_model = PracticeCalculationResponse.model_validate(
        {
            "summary": _practice_summary(result, translator),
            "quarterly": _quarterly_payload(quarterly, translator),
            "tips": _tips_payload(tips),
            "meta": {
                "year": config.year,
                "locale": translator.locale,
                "practice_type": result.practice_type,
                "small_business_exempt": result.small_business_exempt,
            },
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


def _breakdown_payload(breakdown: SocialSecurityBreakdown) -> dict[str, Any]:
    payload = {key: value for key, value in asdict(breakdown).items() if value is not None}
    if "assessment_base" in payload:
        payload["assessment_base"] = round_currency(payload["assessment_base"])
    return payload


def _comprehensive_sections(result: ComprehensiveTaxResult) -> dict[str, Any]:
    return {
        "income": {
            "employment_gross": result.employment_gross,
            "special_payments_gross": result.special_payments_gross,
            "self_employment_profit": result.self_employment_profit,
            "taxable_employment": result.taxable_employment,
            "taxable_self_employment": result.taxable_self_employment,
            "gewinnfreibetrag": result.gewinnfreibetrag,
            "homeoffice_deduction": result.homeoffice_deduction,
            "applied_deductions": result.applied_deductions,
        },
        "social_security": {
            "employee": _breakdown_payload(result.employee_ss_breakdown),
            "self_employed": _breakdown_payload(result.self_employed_ss_breakdown),
            "employee_total": result.employee_ss,
            "self_employed_total": result.self_employed_ss,
            "total": result.total_ss,
        },
        "tax": {
            "income_tax_before_credits": result.income_tax_before_credits,
            "tax_credits_applied": result.tax_credits_applied,
            "special_payments_tax": result.special_payments_tax,
            "total_income_tax": result.total_income_tax,
            "wage_tax_withheld": result.wage_tax_withheld,
            "tax_liability": result.tax_liability,
            "burden_percentage": result.burden_percentage,
        },
        "other_levies": {
            "aerztekammer_beitrag": result.aerztekammer_beitrag,
            "vat": result.vat,
        },
        "bracket_breakdown": [
            {
                "lower": entry.lower,
                "upper": entry.upper,
                "rate": entry.rate,
                "rate_label": format_percentage(entry.rate),
                "taxable_amount": entry.taxable_amount,
                "tax": entry.tax,
            }
            for entry in result.tax_breakdown_by_bracket
        ],
    }


def calculate_comprehensive(
    payload: Mapping[str, Any] | ComprehensiveCalculationRequest,
) -> dict[str, Any]:
    """Compute the comprehensive assessment for salary plus practice income.

    Prepayments are derived from the outstanding liability, so salaried
    income already covered by wage tax does not produce quarterly payments.
    """

    request_model: ComprehensiveCalculationRequest = _validate_request(
        ComprehensiveCalculationRequest, payload
    )

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = _resolve_configuration(request_model.year)
    translator = get_translator(request_model.locale)

    with _profile_section("comprehensive", timings):
        result = calculate_comprehensive_tax(
            ComprehensiveTaxInput(
                employment=request_model.employment,
                self_employment=request_model.self_employment,
                deductions=request_model.deductions,
                credits=request_model.credits,
                tax_year=config.year,
            ),
            config,
        )

    with _profile_section("quarterly", timings):
        quarterly = calculate_quarterly_vorauszahlungen(
            max(result.tax_liability, 0.0), precision=2
        )

    with _profile_section("tips", timings):
        tips = generate_comprehensive_tips(result, config, translator.locale)

    _log_timings("calculate_comprehensive", timings, overall_start)

    summary: dict[str, Any] = {
        field: getattr(result, field) for field in _COMPREHENSIVE_SUMMARY_FIELDS
    }
    summary["total_social_security"] = result.total_ss
    summary["effective_tax_rate"] = result.effective_tax_rate
    summary["marginal_tax_rate"] = result.marginal_tax_rate
    summary["labels"] = {
        field: translator(f"comprehensive.{field}")
        for field in (
            *_COMPREHENSIVE_SUMMARY_FIELDS,
            "total_social_security",
            "effective_tax_rate",
            "marginal_tax_rate",
        )
    }

    practice_type = (
        request_model.self_employment.practice_type if request_model.self_employment else None
    )

    response_model = ComprehensiveCalculationResponse.model_validate(
        {
            "summary": summary,
            **_comprehensive_sections(result),
            "quarterly": _quarterly_payload(quarterly, translator),
            "tips": _tips_payload(tips),
            "meta": {
                "year": config.year,
                "locale": translator.locale,
                "practice_type": practice_type,
            },
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


def compare_practice_scenarios(
    payload: Mapping[str, Any] | ComparisonRequest,
) -> dict[str, Any]:
    """Evaluate named practice scenarios for one year and rank them by net income."""

    request_model: ComparisonRequest = _validate_request(ComparisonRequest, payload)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    config = _resolve_configuration(request_model.year)
    translator = get_translator(request_model.locale)

    results: dict[str, TaxCalculationResult] = {}
    with _profile_section("scenarios", timings):
        for name, scenario in request_model.scenarios.items():
            results[name] = calculate_austrian_tax(_scenario_input(scenario), config)

    with _profile_section("comparison", timings):
        comparison = compare_scenarios(results)

    _log_timings("compare_practice_scenarios", timings, overall_start)

    response_model = ComparisonResponse.model_validate(
        {
            "scenarios": [
                {"name": name, "summary": _practice_summary(result, translator)}
                for name, result in results.items()
            ],
            "metrics": {metric: dict(values) for metric, values in comparison.metrics.items()},
            "best": comparison.best,
            "worst": comparison.worst,
            "meta": {"year": config.year, "locale": translator.locale},
        }
    )

    return response_model.model_dump(mode="json", exclude_none=True)


__all__ = ["calculate_comprehensive", "calculate_practice", "compare_practice_scenarios"]
