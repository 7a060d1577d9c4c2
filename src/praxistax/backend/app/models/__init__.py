"""Typed records shared by the calculators, services and routes.

Inputs are frozen Pydantic models so that callers get validation for free and
the calculators can rely on well-typed numbers. Derived results are plain
frozen dataclasses: they are produced only by the calculators and never need
validation of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from .api import (
    BracketBreakdownPayload,
    ComparisonRequest,
    ComparisonResponse,
    ComprehensiveCalculationRequest,
    ComprehensiveCalculationResponse,
    ComprehensiveSummary,
    PracticeCalculationRequest,
    PracticeCalculationResponse,
    PracticeScenarioInput,
    PracticeSummary,
    QuarterlyPayload,
    ResponseMeta,
    ScenarioEntry,
    TipPayload,
    format_validation_error,
)
from .inputs import (
    ComprehensiveTaxInput,
    EmploymentIncome,
    PracticeType,
    SelfEmploymentIncome,
    TaxCalculationInput,
    TaxCredits,
    TaxDeductions,
)

TipType = Literal["warning", "success", "info", "tip"]
DeadlineType = Literal["filing", "payment", "reminder"]

__all__ = [
    "BracketBreakdownEntry",
    "BracketBreakdownPayload",
    "ComparisonRequest",
    "ComparisonResponse",
    "ComprehensiveCalculationRequest",
    "ComprehensiveCalculationResponse",
    "ComprehensiveSummary",
    "ComprehensiveTaxInput",
    "ComprehensiveTaxResult",
    "DeadlineType",
    "EmploymentIncome",
    "MonthlyTaxProgress",
    "PracticeCalculationRequest",
    "PracticeCalculationResponse",
    "PracticeScenarioInput",
    "PracticeSummary",
    "PracticeType",
    "QuarterlyPayload",
    "QuarterlySplit",
    "ResponseMeta",
    "ScenarioComparison",
    "ScenarioEntry",
    "SelfEmploymentIncome",
    "SocialSecurityBreakdown",
    "TaxCalculationInput",
    "TaxCalculationResult",
    "TaxCredits",
    "TaxDeadline",
    "TaxDeductions",
    "TaxOptimizationTip",
    "TipPayload",
    "TipType",
    "YearComparison",
    "format_validation_error",
]


@dataclass(frozen=True)
class TaxCalculationResult:
    """Outcome of ``calculate_austrian_tax`` plus the context tip rules need."""

    profit: float
    pauschal_deduction: float
    taxable_income: float
    sv_beitraege: float
    aerztekammer_beitrag: float
    income_tax: float
    vat: float
    total_tax_burden: float
    net_income: float
    effective_tax_rate: float
    gross_revenue: float
    total_expenses: float
    practice_type: PracticeType
    applying_pauschalierung: bool
    vat_relevant_revenue: float
    small_business_exempt: bool
    year: int


@dataclass(frozen=True)
class QuarterlySplit:
    """Quarterly income tax prepayments whose quarters sum to ``total``."""

    q1: float
    q2: float
    q3: float
    q4: float
    total: float


@dataclass(frozen=True)
class TaxOptimizationTip:
    id: str
    type: TipType
    message: str
    potential_savings: float | None = None


@dataclass(frozen=True)
class TaxDeadline:
    date: str
    description: str
    type: DeadlineType
    important: bool = False


@dataclass(frozen=True)
class SocialSecurityBreakdown:
    pension: float = 0.0
    health: float = 0.0
    unemployment: float = 0.0
    accident: float = 0.0
    provision: float = 0.0
    special_payments: float = 0.0
    assessment_base: float | None = None


@dataclass(frozen=True)
class BracketBreakdownEntry:
    """Slice of taxable income that fell into a single tariff bracket."""

    lower: float
    upper: float | None
    rate: float
    taxable_amount: float
    tax: float


@dataclass(frozen=True)
class ComprehensiveTaxResult:
    total_gross_income: float
    employment_gross: float
    special_payments_gross: float
    self_employment_profit: float
    employee_ss: float
    self_employed_ss: float
    total_ss: float
    employee_ss_breakdown: SocialSecurityBreakdown
    self_employed_ss_breakdown: SocialSecurityBreakdown
    taxable_employment: float
    taxable_self_employment: float
    gewinnfreibetrag: float
    homeoffice_deduction: float
    applied_deductions: float
    final_taxable_income: float
    income_tax_before_credits: float
    tax_credits_applied: float
    special_payments_tax: float
    total_income_tax: float
    tax_breakdown_by_bracket: tuple[BracketBreakdownEntry, ...]
    aerztekammer_beitrag: float
    vat: float
    wage_tax_withheld: float
    tax_liability: float
    total_direct_burden: float
    burden_percentage: float
    net_income: float
    effective_tax_rate: float
    marginal_tax_rate: float
    tax_year: int


@dataclass(frozen=True)
class MonthlyTaxProgress:
    month: int
    year: int
    ytd_revenue: float
    ytd_expenses: float
    ytd_profit: float
    ytd_tax_burden: float
    projected_annual_burden: float
    burden_percentage: float


@dataclass(frozen=True)
class ScenarioComparison:
    """Side-by-side metrics for named practice scenarios."""

    metrics: Mapping[str, Mapping[str, float]]
    best: str | None
    worst: str | None


@dataclass(frozen=True)
class YearComparison:
    year1: int
    year2: int
    changes: Mapping[str, Mapping[int, float]] = field(default_factory=dict)
