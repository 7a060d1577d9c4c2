"""Comprehensive calculator for physicians with salary and practice income.

Employment and self-employment are assessed separately, merged into a single
taxable income and taxed on the year's progressive tariff. Special payments
(13th/14th salary) are taxed separately at the flat special-payment rate.
"""

from __future__ import annotations

import math

from praxistax.backend.app.models import (
    ComprehensiveTaxInput,
    ComprehensiveTaxResult,
    EmploymentIncome,
    MonthlyTaxProgress,
    SelfEmploymentIncome,
    SocialSecurityBreakdown,
    TaxCredits,
    TaxDeductions,
)
from praxistax.backend.config.year_config import (
    YearConfiguration,
    load_default_configuration,
    load_year_configuration,
)

from .practice import calculate_aerztekammer_beitrag, calculate_vat, is_small_business
from .utils import (
    calculate_bracket_breakdown,
    calculate_progressive_tax,
    marginal_rate,
    round_currency,
)


def _resolve(year: int | None, config: YearConfiguration | None) -> YearConfiguration:
    if config is not None:
        return config
    if year is None:
        return load_default_configuration()
    return load_year_configuration(year)


def calculate_employee_social_security(
    gross_salary: float, special_payments: float, config: YearConfiguration
) -> SocialSecurityBreakdown:
    """Return the employee share of social security on salary and special payments.

    Regular salary is capped at the annual maximum assessment base; special
    payments are assessed only on whatever headroom the cap leaves.
    """

    rules = config.comprehensive.social_security.employee
    regular_base = min(max(gross_salary, 0.0), rules.max_assessment_base)
    headroom = max(rules.max_assessment_base - regular_base, 0.0)
    special_base = min(max(special_payments, 0.0), headroom)

    components = rules.components
    return SocialSecurityBreakdown(
        pension=round_currency(regular_base * components.pension),
        health=round_currency(regular_base * components.health),
        unemployment=round_currency(regular_base * components.unemployment),
        accident=round_currency(regular_base * components.accident),
        special_payments=round_currency(special_base * rules.rate_special),
        assessment_base=regular_base,
    )


def _estimate_employee_breakdown(
    gross_salary: float, config: YearConfiguration
) -> SocialSecurityBreakdown:
    rules = config.comprehensive.social_security.employee
    base = min(gross_salary, rules.max_assessment_base)
    components = rules.components
    return SocialSecurityBreakdown(
        pension=round_currency(base * components.pension),
        health=round_currency(base * components.health),
        unemployment=round_currency(base * components.unemployment),
        accident=round_currency(base * components.accident),
        assessment_base=base,
    )


def calculate_self_employed_social_security(
    profit: float, config: YearConfiguration
) -> SocialSecurityBreakdown:
    """Return SVS contributions on ``profit`` clamped to the assessment range."""

    rules = config.comprehensive.social_security.self_employed
    base = min(max(profit, rules.min_assessment_base), rules.max_assessment_base)
    return SocialSecurityBreakdown(
        pension=round_currency(base * rules.pension_rate),
        health=round_currency(base * rules.health_rate),
        provision=round_currency(base * rules.provision_rate),
        accident=round_currency(rules.accident_annual),
        assessment_base=base,
    )


def _breakdown_total(breakdown: SocialSecurityBreakdown) -> float:
    return round_currency(
        breakdown.pension
        + breakdown.health
        + breakdown.unemployment
        + breakdown.accident
        + breakdown.provision
        + breakdown.special_payments
    )


def calculate_homeoffice_deduction(days: int, config: YearConfiguration) -> float:
    """Return the home-office allowance for ``days`` worked from home.

    Each started block of 20 days unlocks one month of the monthly cap, up to
    twelve months.
    """

    if days <= 0:
        return 0.0
    limits = config.comprehensive.deduction_limits
    months = min(12, math.ceil(days / 20))
    return round_currency(
        min(days * limits.homeoffice_daily, limits.homeoffice_monthly_max * months)
    )


def calculate_gewinnfreibetrag(profit: float, config: YearConfiguration) -> float:
    """Return the basic profit allowance (Grundfreibetrag of the Gewinnfreibetrag)."""

    limits = config.comprehensive.deduction_limits
    capped = min(max(profit, 0.0), limits.gewinnfreibetrag_limit)
    return round_currency(capped * limits.gewinnfreibetrag_rate)


def calculate_special_payments_tax(net_special_payments: float, config: YearConfiguration) -> float:
    rules = config.comprehensive.special_payments
    return round_currency(max(net_special_payments - rules.tax_free_limit, 0.0) * rules.rate)


def calculate_total_deductions(
    deductions: TaxDeductions | None, config: YearConfiguration
) -> float:
    """Return Sonderausgaben with the statutory caps applied."""

    if deductions is None:
        return 0.0
    limits = config.comprehensive.deduction_limits
    return round_currency(
        deductions.charitable_donations
        + min(deductions.pension_contributions, limits.pension_contribution_max)
        + min(deductions.life_insurance_premiums, limits.life_insurance_max)
        + deductions.church_tax
        + deductions.home_loan_interest
    )


def calculate_tax_credits(credits: TaxCredits | None, config: YearConfiguration) -> float:
    if credits is None:
        return 0.0
    rules = config.comprehensive.tax_credits

    total = credits.commuter_allowance + credits.child_support_credit
    if credits.has_commuter_credit:
        total += rules.commuter_credit
    if credits.sole_earner_credit is not None:
        total += credits.sole_earner_credit
    elif credits.claims_sole_earner:
        total += rules.sole_earner_amount(credits.number_of_children)
    return round_currency(total)


def calculate_comprehensive_tax(
    payload: ComprehensiveTaxInput, config: YearConfiguration | None = None
) -> ComprehensiveTaxResult:
    """Return the full assessment for ``payload``.

    ``config`` overrides the configuration implied by ``payload.tax_year``.
    """

    config = _resolve(payload.tax_year, config)
    employment = payload.employment
    self_employment = payload.self_employment

    # Employment income
    employment_gross = 0.0
    special_payments_gross = 0.0
    wage_tax_withheld = 0.0
    employee_ss = 0.0
    employee_breakdown = SocialSecurityBreakdown()
    homeoffice_deduction = 0.0
    taxable_employment = 0.0
    special_payments_net = 0.0

    if employment is not None:
        employment_gross = round_currency(employment.gross_salary)
        special_payments_gross = round_currency(employment.special_payments_gross)
        wage_tax_withheld = round_currency(employment.wage_tax_withheld)

        if employment.employee_ss_paid is not None:
            employee_ss = round_currency(employment.employee_ss_paid)
            employee_breakdown = _estimate_employee_breakdown(employment_gross, config)
        else:
            employee_breakdown = calculate_employee_social_security(
                employment_gross, special_payments_gross, config
            )
            employee_ss = _breakdown_total(employee_breakdown)

        homeoffice_deduction = calculate_homeoffice_deduction(employment.home_office_days, config)
        regular_ss = employee_ss - employee_breakdown.special_payments
        taxable_employment = round_currency(
            max(
                employment_gross
                - regular_ss
                - homeoffice_deduction
                - config.comprehensive.deduction_limits.standard_work_expenses,
                0.0,
            )
        )
        special_payments_net = max(
            special_payments_gross - employee_breakdown.special_payments, 0.0
        )

    # Self-employment income
    self_employment_profit = 0.0
    self_employed_ss = 0.0
    self_employed_breakdown = SocialSecurityBreakdown()
    gewinnfreibetrag = 0.0
    taxable_self_employment = 0.0

    if self_employment is not None:
        self_employment_profit = round_currency(
            max(self_employment.total_revenue - self_employment.business_expenses, 0.0)
        )
        self_employed_breakdown = calculate_self_employed_social_security(
            self_employment_profit, config
        )
        self_employed_ss = _breakdown_total(self_employed_breakdown)
        gewinnfreibetrag = calculate_gewinnfreibetrag(self_employment_profit, config)
        taxable_self_employment = round_currency(
            max(self_employment_profit - gewinnfreibetrag, 0.0)
        )

    total_gross_income = round_currency(
        employment_gross + special_payments_gross + self_employment_profit
    )
    total_ss = round_currency(employee_ss + self_employed_ss)

    # Deductions, tariff and credits
    applied_deductions = calculate_total_deductions(payload.deductions, config)
    tax_credits = calculate_tax_credits(payload.credits, config)
    final_taxable_income = round_currency(
        max(taxable_employment + taxable_self_employment - applied_deductions, 0.0)
    )

    brackets = config.income_tax.brackets
    income_tax_before_credits = round_currency(
        calculate_progressive_tax(final_taxable_income, brackets)
    )
    tax_credits_applied = round_currency(min(tax_credits, income_tax_before_credits))
    special_payments_tax = calculate_special_payments_tax(special_payments_net, config)
    total_income_tax = round_currency(
        income_tax_before_credits - tax_credits_applied + special_payments_tax
    )

    # Medical practice levies
    aerztekammer_beitrag = 0.0
    vat = 0.0
    if self_employment is not None and self_employment.practice_type is not None:
        aerztekammer_beitrag = round_currency(
            calculate_aerztekammer_beitrag(self_employment_profit, config)
        )
        if self_employment.practice_type != "kassenarzt":
            vat_relevant = self_employment.vat_relevant_revenue
            vat = round_currency(
                calculate_vat(vat_relevant, is_small_business(vat_relevant, config), config)
            )

    total_direct_burden = round_currency(total_ss + total_income_tax + aerztekammer_beitrag + vat)
    net_income = round_currency(total_gross_income - total_direct_burden)
    if total_gross_income > 0:
        burden_percentage = round_currency(total_direct_burden / total_gross_income * 100)
        effective_tax_rate = round_currency(total_income_tax / total_gross_income * 100)
    else:
        burden_percentage = 0.0
        effective_tax_rate = 0.0

    return ComprehensiveTaxResult(
        total_gross_income=total_gross_income,
        employment_gross=employment_gross,
        special_payments_gross=special_payments_gross,
        self_employment_profit=self_employment_profit,
        employee_ss=employee_ss,
        self_employed_ss=self_employed_ss,
        total_ss=total_ss,
        employee_ss_breakdown=employee_breakdown,
        self_employed_ss_breakdown=self_employed_breakdown,
        taxable_employment=taxable_employment,
        taxable_self_employment=taxable_self_employment,
        gewinnfreibetrag=gewinnfreibetrag,
        homeoffice_deduction=homeoffice_deduction,
        applied_deductions=applied_deductions,
        final_taxable_income=final_taxable_income,
        income_tax_before_credits=income_tax_before_credits,
        tax_credits_applied=tax_credits_applied,
        special_payments_tax=special_payments_tax,
        total_income_tax=total_income_tax,
        tax_breakdown_by_bracket=tuple(calculate_bracket_breakdown(final_taxable_income, brackets)),
        aerztekammer_beitrag=aerztekammer_beitrag,
        vat=vat,
        wage_tax_withheld=wage_tax_withheld,
        tax_liability=round_currency(total_income_tax - wage_tax_withheld),
        total_direct_burden=total_direct_burden,
        burden_percentage=burden_percentage,
        net_income=net_income,
        effective_tax_rate=effective_tax_rate,
        marginal_tax_rate=round_currency(marginal_rate(final_taxable_income, brackets) * 100),
        tax_year=config.year,
    )


def quick_tax_estimate(
    employment_gross: float = 0.0,
    self_employment_profit: float = 0.0,
    year: int | None = None,
) -> ComprehensiveTaxResult:
    """Estimate the burden from two headline figures."""

    payload = ComprehensiveTaxInput(
        employment=(
            EmploymentIncome(gross_salary=employment_gross) if employment_gross > 0 else None
        ),
        self_employment=(
            SelfEmploymentIncome(total_revenue=self_employment_profit)
            if self_employment_profit > 0
            else None
        ),
        tax_year=year,
    )
    return calculate_comprehensive_tax(payload)


def calculate_monthly_progress(
    ytd_revenue: float,
    ytd_expenses: float,
    ytd_employment: float = 0.0,
    month: int = 6,
    year: int | None = None,
) -> MonthlyTaxProgress:
    """Project the annual burden from year-to-date figures after ``month``."""

    if not 1 <= month <= 12:
        raise ValueError("month must be between 1 and 12")

    payload = ComprehensiveTaxInput(
        employment=(
            EmploymentIncome(gross_salary=ytd_employment) if ytd_employment > 0 else None
        ),
        self_employment=SelfEmploymentIncome(
            total_revenue=max(ytd_revenue, 0.0),
            business_expenses=max(ytd_expenses, 0.0),
        ),
        tax_year=year,
    )
    result = calculate_comprehensive_tax(payload)

    return MonthlyTaxProgress(
        month=month,
        year=result.tax_year,
        ytd_revenue=ytd_revenue,
        ytd_expenses=ytd_expenses,
        ytd_profit=ytd_revenue - ytd_expenses,
        ytd_tax_burden=result.total_direct_burden,
        projected_annual_burden=round_currency(result.total_direct_burden / month * 12),
        burden_percentage=result.burden_percentage,
    )


__all__ = [
    "calculate_comprehensive_tax",
    "calculate_employee_social_security",
    "calculate_gewinnfreibetrag",
    "calculate_homeoffice_deduction",
    "calculate_monthly_progress",
    "calculate_self_employed_social_security",
    "calculate_special_payments_tax",
    "calculate_tax_credits",
    "calculate_total_deductions",
    "quick_tax_estimate",
]
