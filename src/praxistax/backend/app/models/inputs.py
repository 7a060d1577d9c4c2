"""Validated input records consumed by the calculators."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PracticeType = Literal["kassenarzt", "wahlarzt", "mixed"]

__all__ = [
    "ComprehensiveTaxInput",
    "EmploymentIncome",
    "PracticeType",
    "SelfEmploymentIncome",
    "TaxCalculationInput",
    "TaxCredits",
    "TaxDeductions",
]


class TaxCalculationInput(BaseModel):
    """One practice-year scenario for the practice calculator.

    ``private_patient_revenue`` is the VAT-relevant share of revenue. When it
    is omitted the whole ``gross_revenue`` counts as VAT-relevant.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    gross_revenue: float
    total_expenses: float
    practice_type: PracticeType
    applying_pauschalierung: bool = False
    private_patient_revenue: float | None = None

    @field_validator("practice_type", mode="before")
    @classmethod
    def _normalise_practice_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def vat_relevant_revenue(self) -> float:
        if self.private_patient_revenue is None:
            return self.gross_revenue
        return self.private_patient_revenue


class EmploymentIncome(BaseModel):
    """Salary income as reported on the annual payslip (Lohnzettel)."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    gross_salary: float = Field(default=0.0, ge=0)
    special_payments_gross: float = Field(default=0.0, ge=0)
    home_office_days: int = Field(default=0, ge=0, le=366)
    employee_ss_paid: float | None = Field(default=None, ge=0)
    wage_tax_withheld: float = Field(default=0.0, ge=0)


class SelfEmploymentIncome(BaseModel):
    """Business income of a self-employed physician."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    total_revenue: float = Field(default=0.0, ge=0)
    business_expenses: float = Field(default=0.0, ge=0)
    practice_type: PracticeType | None = None
    private_patient_revenue: float | None = Field(default=None, ge=0)

    @property
    def vat_relevant_revenue(self) -> float:
        if self.private_patient_revenue is None:
            return self.total_revenue
        return self.private_patient_revenue


class TaxDeductions(BaseModel):
    """Special expenses (Sonderausgaben) claimed in the return."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    charitable_donations: float = Field(default=0.0, ge=0)
    pension_contributions: float = Field(default=0.0, ge=0)
    life_insurance_premiums: float = Field(default=0.0, ge=0)
    church_tax: float = Field(default=0.0, ge=0)
    home_loan_interest: float = Field(default=0.0, ge=0)


class TaxCredits(BaseModel):
    """Tax credits (Absetzbeträge) claimed in the return.

    ``sole_earner_credit`` takes precedence; otherwise ``claims_sole_earner``
    derives the amount from the year configuration and ``number_of_children``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    has_commuter_credit: bool = False
    commuter_allowance: float = Field(default=0.0, ge=0)
    sole_earner_credit: float | None = Field(default=None, ge=0)
    claims_sole_earner: bool = False
    child_support_credit: float = Field(default=0.0, ge=0)
    number_of_children: int = Field(default=0, ge=0, le=20)


class ComprehensiveTaxInput(BaseModel):
    """Mixed employment and self-employment scenario for one tax year."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    employment: EmploymentIncome | None = None
    self_employment: SelfEmploymentIncome | None = None
    deductions: TaxDeductions | None = None
    credits: TaxCredits | None = None
    tax_year: int | None = None
