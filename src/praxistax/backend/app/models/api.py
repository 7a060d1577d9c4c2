"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .inputs import (
    EmploymentIncome,
    PracticeType,
    SelfEmploymentIncome,
    TaxCredits,
    TaxDeductions,
)

__all__ = [
    "PracticeCalculationRequest",
    "PracticeScenarioInput",
    "ComprehensiveCalculationRequest",
    "ComparisonRequest",
    "TipPayload",
    "QuarterlyPayload",
    "PracticeSummary",
    "ResponseMeta",
    "PracticeCalculationResponse",
    "BracketBreakdownPayload",
    "ComprehensiveSummary",
    "ComprehensiveCalculationResponse",
    "ScenarioEntry",
    "ComparisonResponse",
    "format_validation_error",
]


def _normalise_locale_value(value: Any) -> str:
    if value is None:
        return "de"
    text = str(value).strip()
    return text or "de"


class PracticeScenarioInput(BaseModel):
    """Practice figures supplied by the client for a single scenario."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    gross_revenue: float = Field(..., ge=0)
    total_expenses: float = Field(default=0.0, ge=0)
    practice_type: PracticeType
    applying_pauschalierung: bool = False
    private_patient_revenue: float | None = Field(default=None, ge=0)

    @field_validator("practice_type", mode="before")
    @classmethod
    def _normalise_practice_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class PracticeCalculationRequest(PracticeScenarioInput):
    """Payload accepted by the practice calculation endpoint."""

    year: int | None = Field(default=None, ge=0)
    locale: str = Field(default="de")

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        return _normalise_locale_value(value)


class ComprehensiveCalculationRequest(BaseModel):
    """Payload accepted by the comprehensive calculation endpoint."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    year: int | None = Field(default=None, ge=0)
    locale: str = Field(default="de")
    employment: EmploymentIncome | None = None
    self_employment: SelfEmploymentIncome | None = None
    deductions: TaxDeductions | None = None
    credits: TaxCredits | None = None

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        return _normalise_locale_value(value)


class ComparisonRequest(BaseModel):
    """Named practice scenarios evaluated side by side."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    year: int | None = Field(default=None, ge=0)
    locale: str = Field(default="de")
    scenarios: dict[str, PracticeScenarioInput] = Field(..., min_length=1)

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        return _normalise_locale_value(value)


class TipPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    type: str
    message: str
    potential_savings: float | None = None


class QuarterlyPayload(BaseModel):
    """Rounded prepayment split; ``q4`` absorbs the rounding remainder."""

    model_config = ConfigDict(extra="forbid")

    q1: float
    q2: float
    q3: float
    q4: float
    total: float
    labels: dict[str, str]


class PracticeSummary(BaseModel):
    """Rounded practice result with localized labels."""

    model_config = ConfigDict(extra="forbid")

    gross_revenue: float
    total_expenses: float
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
    labels: dict[str, str]


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str
    practice_type: str | None = None
    small_business_exempt: bool | None = None


class PracticeCalculationResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    summary: PracticeSummary
    quarterly: QuarterlyPayload
    tips: list[TipPayload]
    meta: ResponseMeta


class BracketBreakdownPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lower: float
    upper: float | None = None
    rate: float
    rate_label: str
    taxable_amount: float
    tax: float


class ComprehensiveSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_gross_income: float
    total_social_security: float
    final_taxable_income: float
    total_income_tax: float
    total_direct_burden: float
    net_income: float
    effective_tax_rate: float
    marginal_tax_rate: float
    tax_liability: float
    labels: dict[str, str]


class ComprehensiveCalculationResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    summary: ComprehensiveSummary
    income: dict[str, float]
    social_security: dict[str, Any]
    tax: dict[str, float]
    other_levies: dict[str, float]
    bracket_breakdown: list[BracketBreakdownPayload]
    quarterly: QuarterlyPayload
    tips: list[TipPayload]
    meta: ResponseMeta


class ScenarioEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    summary: PracticeSummary


class ComparisonResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scenarios: list[ScenarioEntry]
    metrics: dict[str, dict[str, float]]
    best: str | None = None
    worst: str | None = None
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
