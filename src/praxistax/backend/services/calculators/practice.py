"""Tax calculators for a physician's practice (Einzelordination).

Each primitive takes an optional :class:`YearConfiguration`; omitting it uses
the manifest's default tax year. None of the functions raise for numeric
input: losses, zero and extreme values are handled by clamping.
"""

from __future__ import annotations

from praxistax.backend.app.models import TaxCalculationInput, TaxCalculationResult
from praxistax.backend.config.year_config import (
    YearConfiguration,
    load_default_configuration,
)

from .utils import calculate_progressive_tax


def _resolve(config: YearConfiguration | None) -> YearConfiguration:
    return config if config is not None else load_default_configuration()


def calculate_income_tax(
    taxable_income: float, config: YearConfiguration | None = None
) -> float:
    """Return progressive income tax on ``taxable_income`` (never negative)."""

    return calculate_progressive_tax(taxable_income, _resolve(config).income_tax.brackets)


def calculate_sv_beitraege(profit: float, config: YearConfiguration | None = None) -> float:
    """Return SVS contributions on ``profit``.

    The assessment base is clamped to ``[0, max_assessment_base]`` and the
    result never drops below the minimum contribution, so a loss year still
    owes the minimum.
    """

    rules = _resolve(config).practice.social_security
    assessment_base = min(max(profit, 0.0), rules.max_assessment_base)
    return max(assessment_base * rules.rate, rules.minimum_contribution)


def calculate_aerztekammer_beitrag(
    profit: float, config: YearConfiguration | None = None
) -> float:
    """Return the medical chamber levy: base fee plus an uncapped profit share."""

    chamber = _resolve(config).practice.chamber
    return chamber.base_fee + max(profit, 0.0) * chamber.rate


def calculate_vat(
    revenue: float,
    is_kleinunternehmer: bool = False,
    config: YearConfiguration | None = None,
) -> float:
    """Return the VAT contained in gross ``revenue``.

    Small businesses (Kleinunternehmer) are exempt and owe nothing.
    """

    if is_kleinunternehmer or revenue <= 0:
        return 0.0

    rate = _resolve(config).practice.vat.standard_rate
    return revenue * rate / (1 + rate)


def calculate_pauschal_deduction(
    profit: float, applying: bool, config: YearConfiguration | None = None
) -> float:
    """Return the flat-rate expense deduction when Pauschalierung applies.

    Eligibility (the revenue ceiling) is the caller's concern; the calculator
    trusts ``applying``.
    """

    if not applying:
        return 0.0
    return profit * _resolve(config).practice.flat_rate.rate


def is_small_business(revenue: float, config: YearConfiguration | None = None) -> bool:
    """Return ``True`` when ``revenue`` stays below the Kleinunternehmer threshold."""

    return revenue < _resolve(config).practice.vat.small_business_threshold


def calculate_austrian_tax(
    payload: TaxCalculationInput, config: YearConfiguration | None = None
) -> TaxCalculationResult:
    """Compose the primitives into the full practice result."""

    config = _resolve(config)

    profit = payload.gross_revenue - payload.total_expenses
    positive_profit = max(profit, 0.0)

    pauschal_deduction = calculate_pauschal_deduction(
        positive_profit, payload.applying_pauschalierung, config
    )
    taxable_income = profit - pauschal_deduction

    sv_beitraege = calculate_sv_beitraege(positive_profit, config)
    aerztekammer_beitrag = calculate_aerztekammer_beitrag(positive_profit, config)
    income_tax = calculate_income_tax(taxable_income, config) if profit > 0 else 0.0

    vat_relevant_revenue = payload.vat_relevant_revenue
    small_business_exempt = is_small_business(vat_relevant_revenue, config)
    if payload.practice_type == "kassenarzt":
        vat = 0.0
    else:
        vat = calculate_vat(vat_relevant_revenue, small_business_exempt, config)

    total_tax_burden = sv_beitraege + aerztekammer_beitrag + income_tax + vat
    net_income = profit - total_tax_burden
    effective_tax_rate = total_tax_burden / profit * 100 if profit > 0 else 0.0

    return TaxCalculationResult(
        profit=profit,
        pauschal_deduction=pauschal_deduction,
        taxable_income=taxable_income,
        sv_beitraege=sv_beitraege,
        aerztekammer_beitrag=aerztekammer_beitrag,
        income_tax=income_tax,
        vat=vat,
        total_tax_burden=total_tax_burden,
        net_income=net_income,
        effective_tax_rate=effective_tax_rate,
        gross_revenue=payload.gross_revenue,
        total_expenses=payload.total_expenses,
        practice_type=payload.practice_type,
        applying_pauschalierung=payload.applying_pauschalierung,
        vat_relevant_revenue=vat_relevant_revenue,
        small_business_exempt=small_business_exempt,
        year=config.year,
    )


__all__ = [
    "calculate_aerztekammer_beitrag",
    "calculate_austrian_tax",
    "calculate_income_tax",
    "calculate_pauschal_deduction",
    "calculate_sv_beitraege",
    "calculate_vat",
    "is_small_business",
]
