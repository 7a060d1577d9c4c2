"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
import math
from typing import Sequence

from .year_config import (
    ComprehensiveConfig,
    IncomeTaxConfig,
    PracticeConfig,
    TipThresholds,
    YearConfiguration,
    available_years,
    load_year_configuration,
)

# Component rates are published with four decimals.
_RATE_TOLERANCE = 1e-6


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_income_tax(income_tax: IncomeTaxConfig) -> list[str]:
    errors: list[str] = []
    brackets = list(income_tax.brackets)

    previous_rate = -1.0
    for index, bracket in enumerate(brackets):
        if bracket.rate > 1:
            errors.append(
                _format_scope(
                    "income_tax.tax_brackets",
                    f"bracket {index + 1} rate {bracket.rate} must not exceed 1",
                )
            )
        if bracket.rate < previous_rate:
            errors.append(
                _format_scope(
                    "income_tax.tax_brackets",
                    f"bracket {index + 1} rate decreases compared to the previous bracket",
                )
            )
        previous_rate = bracket.rate

    if brackets and brackets[0].rate != 0:
        errors.append(
            _format_scope(
                "income_tax.tax_brackets",
                "first bracket should be the tax-free allowance (rate 0)",
            )
        )

    return errors


def _validate_practice(practice: PracticeConfig) -> list[str]:
    errors: list[str] = []

    social_security = practice.social_security
    capped_contribution = social_security.max_assessment_base * social_security.rate
    if social_security.minimum_contribution > capped_contribution:
        errors.append(
            _format_scope(
                "practice.social_security",
                "minimum contribution exceeds the contribution at the maximum assessment base",
            )
        )

    if practice.vat.small_business_threshold <= 0:
        errors.append(
            _format_scope("practice.vat", "small business threshold must be positive")
        )

    if practice.flat_rate.revenue_ceiling <= practice.vat.small_business_threshold:
        errors.append(
            _format_scope(
                "practice.flat_rate",
                "revenue ceiling should exceed the small business threshold",
            )
        )

    return errors


def _validate_comprehensive(comprehensive: ComprehensiveConfig) -> list[str]:
    errors: list[str] = []

    employee = comprehensive.social_security.employee
    if not math.isclose(
        employee.components.total, employee.rate_regular, abs_tol=_RATE_TOLERANCE
    ):
        errors.append(
            _format_scope(
                "comprehensive.social_security.employee",
                (
                    f"component rates sum to {employee.components.total:.4f} "
                    f"but the regular rate is {employee.rate_regular:.4f}"
                ),
            )
        )

    if employee.rate_special > employee.rate_regular:
        errors.append(
            _format_scope(
                "comprehensive.social_security.employee",
                "special payment rate should not exceed the regular rate",
            )
        )

    self_employed = comprehensive.social_security.self_employed
    if self_employed.min_assessment_base == self_employed.max_assessment_base:
        errors.append(
            _format_scope(
                "comprehensive.social_security.self_employed",
                "minimum and maximum assessment bases are identical",
            )
        )

    credits = comprehensive.tax_credits
    if credits.sole_earner_one_child < credits.sole_earner_single:
        errors.append(
            _format_scope(
                "comprehensive.tax_credits",
                "sole earner credit with children should not be below the single amount",
            )
        )

    limits = comprehensive.deduction_limits
    if limits.homeoffice_daily > limits.homeoffice_monthly_max:
        errors.append(
            _format_scope(
                "comprehensive.deduction_limits",
                "home office daily rate exceeds the monthly maximum",
            )
        )

    return errors


def _validate_tips(tips: TipThresholds) -> list[str]:
    errors: list[str] = []

    for label in ("high_effective_rate", "high_marginal_rate"):
        value = getattr(tips, label)
        if value <= 0 or value > 100:
            errors.append(
                _format_scope("tips", f"{label} must be a percentage between 0 and 100")
            )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues detected for ``config``."""

    errors: list[str] = []

    errors.extend(_validate_income_tax(config.income_tax))
    errors.extend(_validate_practice(config.practice))
    errors.extend(_validate_comprehensive(config.comprehensive))
    errors.extend(_validate_tips(config.tips))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, ValueError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
