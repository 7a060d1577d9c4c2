"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _require_rate(value: float, label: str) -> None:
    if value < 0 or value > 1:
        raise ConfigurationError(f"{label} must be between 0 and 1")


def _require_non_negative(value: float, label: str) -> None:
    if value < 0:
        raise ConfigurationError(f"{label} must be non-negative")


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket."""

    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float
    description: str | None = None

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Upper bounds must be positive values")
        return self


class IncomeTaxConfig(ImmutableModel):
    """Progressive income tax table (Einkommensteuertarif)."""

    brackets: tuple[TaxBracket, ...] = Field(alias="tax_brackets")

    @model_validator(mode="after")
    def _validate_brackets(self) -> IncomeTaxConfig:
        if not self.brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        last_upper: float | None = None
        for bracket in self.brackets[:-1]:
            upper = bracket.upper_bound
            if upper is None:
                raise ConfigurationError("Only the final tax bracket may be open-ended")
            if last_upper is not None and upper <= last_upper:
                raise ConfigurationError("Tax brackets must be in ascending order")
            last_upper = upper
        if self.brackets[-1].upper_bound is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")
        return self

    @computed_field
    @property
    def tax_free_threshold(self) -> float:
        first = self.brackets[0]
        if first.rate == 0 and first.upper_bound is not None:
            return first.upper_bound
        return 0.0


class PracticeSocialSecurityConfig(ImmutableModel):
    """Flat SVS contribution model used by the practice calculator."""

    rate: float
    minimum_contribution: float
    max_assessment_base: float

    @model_validator(mode="after")
    def _validate_values(self) -> PracticeSocialSecurityConfig:
        _require_rate(self.rate, "Social security rate")
        _require_non_negative(self.minimum_contribution, "'minimum_contribution'")
        if self.max_assessment_base <= 0:
            raise ConfigurationError("'max_assessment_base' must be positive")
        return self


class ChamberLevyConfig(ImmutableModel):
    """Ärztekammer membership levy: base fee plus a share of profit."""

    base_fee: float
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> ChamberLevyConfig:
        _require_non_negative(self.base_fee, "Chamber 'base_fee'")
        _require_rate(self.rate, "Chamber rate")
        return self


class VatConfig(ImmutableModel):
    """Standard VAT rate and the Kleinunternehmer revenue ceiling."""

    standard_rate: float
    small_business_threshold: float

    @model_validator(mode="after")
    def _validate_values(self) -> VatConfig:
        _require_rate(self.standard_rate, "VAT rate")
        _require_non_negative(self.small_business_threshold, "'small_business_threshold'")
        return self


class FlatRateConfig(ImmutableModel):
    """Pauschalierung rate and the revenue ceiling for eligibility."""

    rate: float
    revenue_ceiling: float

    @model_validator(mode="after")
    def _validate_values(self) -> FlatRateConfig:
        _require_rate(self.rate, "Flat-rate deduction rate")
        _require_non_negative(self.revenue_ceiling, "'revenue_ceiling'")
        return self


class PracticeConfig(ImmutableModel):
    """Constants used by the medical practice calculator."""

    social_security: PracticeSocialSecurityConfig
    chamber: ChamberLevyConfig
    vat: VatConfig
    flat_rate: FlatRateConfig


class EmployeeComponentRates(ImmutableModel):
    """Split of the employee contribution rate across insurance branches."""

    pension: float
    health: float
    unemployment: float
    accident: float

    @model_validator(mode="after")
    def _validate_values(self) -> EmployeeComponentRates:
        for label in ("pension", "health", "unemployment", "accident"):
            _require_rate(getattr(self, label), f"Employee {label} rate")
        return self

    @computed_field
    @property
    def total(self) -> float:
        return self.pension + self.health + self.unemployment + self.accident


class EmployeeSocialSecurityConfig(ImmutableModel):
    """Employee contributions on regular salary and special payments."""

    rate_regular: float
    rate_special: float
    max_assessment_base: float
    components: EmployeeComponentRates

    @model_validator(mode="after")
    def _validate_values(self) -> EmployeeSocialSecurityConfig:
        _require_rate(self.rate_regular, "Employee regular rate")
        _require_rate(self.rate_special, "Employee special payment rate")
        if self.max_assessment_base <= 0:
            raise ConfigurationError("Employee 'max_assessment_base' must be positive")
        return self


class SelfEmployedSocialSecurityConfig(ImmutableModel):
    """SVS contributions for self-employed income (GSVG/FSVG)."""

    min_assessment_base: float
    max_assessment_base: float
    pension_rate: float
    health_rate: float
    provision_rate: float = 0.0
    accident_annual: float = 0.0

    @model_validator(mode="after")
    def _validate_values(self) -> SelfEmployedSocialSecurityConfig:
        _require_non_negative(self.min_assessment_base, "'min_assessment_base'")
        if self.max_assessment_base < self.min_assessment_base:
            raise ConfigurationError(
                "'max_assessment_base' must not be below 'min_assessment_base'"
            )
        for label in ("pension_rate", "health_rate", "provision_rate"):
            _require_rate(getattr(self, label), f"Self-employed '{label}'")
        _require_non_negative(self.accident_annual, "'accident_annual'")
        return self

    @computed_field
    @property
    def rate(self) -> float:
        return self.pension_rate + self.health_rate + self.provision_rate


class SocialSecurityConfig(ImmutableModel):
    """Contribution rules for the comprehensive calculator."""

    employee: EmployeeSocialSecurityConfig
    self_employed: SelfEmployedSocialSecurityConfig


class TaxCreditConfig(ImmutableModel):
    """Statutory tax credits (Absetzbeträge)."""

    commuter_credit: float
    sole_earner_single: float
    sole_earner_one_child: float
    sole_earner_per_additional_child: float = 0.0

    @model_validator(mode="after")
    def _validate_values(self) -> TaxCreditConfig:
        for label in (
            "commuter_credit",
            "sole_earner_single",
            "sole_earner_one_child",
            "sole_earner_per_additional_child",
        ):
            _require_non_negative(getattr(self, label), f"'{label}'")
        return self

    def sole_earner_amount(self, children: int) -> float:
        if children <= 0:
            return self.sole_earner_single
        return self.sole_earner_one_child + (children - 1) * self.sole_earner_per_additional_child


class DeductionLimits(ImmutableModel):
    """Caps and rates for deductions applied before the tariff."""

    life_insurance_max: float
    pension_contribution_max: float
    gewinnfreibetrag_rate: float
    gewinnfreibetrag_limit: float
    homeoffice_daily: float
    homeoffice_monthly_max: float
    standard_work_expenses: float = 132.0

    @model_validator(mode="after")
    def _validate_values(self) -> DeductionLimits:
        _require_rate(self.gewinnfreibetrag_rate, "Gewinnfreibetrag rate")
        for label in (
            "life_insurance_max",
            "pension_contribution_max",
            "gewinnfreibetrag_limit",
            "homeoffice_daily",
            "homeoffice_monthly_max",
            "standard_work_expenses",
        ):
            _require_non_negative(getattr(self, label), f"'{label}'")
        return self


class SpecialPaymentsConfig(ImmutableModel):
    """Fixed-rate taxation of 13th/14th salaries (sonstige Bezüge)."""

    tax_free_limit: float
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> SpecialPaymentsConfig:
        _require_non_negative(self.tax_free_limit, "'tax_free_limit'")
        _require_rate(self.rate, "Special payments rate")
        return self


class ComprehensiveConfig(ImmutableModel):
    """Constants used by the mixed employment/self-employment calculator."""

    social_security: SocialSecurityConfig
    tax_credits: TaxCreditConfig
    deduction_limits: DeductionLimits
    special_payments: SpecialPaymentsConfig


class TipThresholds(ImmutableModel):
    """Trigger values for the optimisation tip rules."""

    high_effective_rate: float = 45.0
    strong_net_income: float = 60_000.0
    low_profit: float = 10_000.0
    high_social_security_share: float = 0.30
    small_business_warning_share: float = 0.80
    high_marginal_rate: float = 48.0
    pension_opportunity_income: float = 50_000.0

    @model_validator(mode="after")
    def _validate_values(self) -> TipThresholds:
        _require_rate(self.high_social_security_share, "'high_social_security_share'")
        _require_rate(self.small_business_warning_share, "'small_business_warning_share'")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    income_tax: IncomeTaxConfig
    practice: PracticeConfig
    comprehensive: ComprehensiveConfig
    tips: TipThresholds = Field(default_factory=TipThresholds)

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("income_tax", "practice", "comprehensive"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")

        if prepared.get("tips") is None:
            prepared["tips"] = {}

        return prepared

    @field_validator("year")
    @classmethod
    def _validate_year(cls, value: int) -> int:
        if value <= 0:
            raise ConfigurationError("'year' must be a positive integer")
        return value


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    default: bool = False
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: tuple[TaxYearManifestEntry, ...]

    @model_validator(mode="after")
    def _validate_years(self) -> Self:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        if sum(1 for entry in self.years if entry.default) > 1:
            raise ConfigurationError("Only one manifest entry may be flagged as default")
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))

    @computed_field
    @property
    def default_year(self) -> int | None:
        for entry in self.years:
            if entry.default:
                return entry.year
        years = self.supported_years
        return years[-1] if years else None


__all__ = [
    "ChamberLevyConfig",
    "ComprehensiveConfig",
    "ConfigurationError",
    "DeductionLimits",
    "EmployeeComponentRates",
    "EmployeeSocialSecurityConfig",
    "FlatRateConfig",
    "ImmutableModel",
    "IncomeTaxConfig",
    "PracticeConfig",
    "PracticeSocialSecurityConfig",
    "SelfEmployedSocialSecurityConfig",
    "SocialSecurityConfig",
    "SpecialPaymentsConfig",
    "TaxBracket",
    "TaxCreditConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "TipThresholds",
    "VatConfig",
    "YearConfiguration",
    "ValidationError",
]
