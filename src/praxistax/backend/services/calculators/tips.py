"""Rule tables producing optimisation tips for calculation results.

Rules are evaluated in declaration order and independently of each other: a
rule never suppresses another one. Adding a tip means appending a
:class:`TipRule` to the relevant table.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from praxistax.backend.app.localization import Translator, get_translator
from praxistax.backend.app.models import (
    ComprehensiveTaxResult,
    TaxCalculationResult,
    TaxOptimizationTip,
    TipType,
)
from praxistax.backend.config.year_config import (
    YearConfiguration,
    load_year_configuration,
)

from .utils import (
    calculate_progressive_tax,
    format_euro_at,
    format_percentage,
    round_currency,
)

ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class TipRule(Generic[ResultT]):
    """A single ``predicate -> message`` rule."""

    id: str
    type: TipType
    message_key: str
    applies: Callable[[ResultT, YearConfiguration], bool]
    message_values: Callable[[ResultT, YearConfiguration], dict[str, str]] | None = None
    savings: Callable[[ResultT, YearConfiguration], float | None] | None = None

    def evaluate(
        self, result: ResultT, config: YearConfiguration, translator: Translator
    ) -> TaxOptimizationTip | None:
        if not self.applies(result, config):
            return None
        values = self.message_values(result, config) if self.message_values else {}
        potential_savings = self.savings(result, config) if self.savings else None
        return TaxOptimizationTip(
            id=self.id,
            type=self.type,
            message=translator(self.message_key, **values),
            potential_savings=(
                round_currency(potential_savings) if potential_savings is not None else None
            ),
        )


def _pauschal_amount(result: TaxCalculationResult, config: YearConfiguration) -> float:
    return max(result.profit, 0.0) * config.practice.flat_rate.rate


def _pauschal_savings(result: TaxCalculationResult, config: YearConfiguration) -> float:
    brackets = config.income_tax.brackets
    reduced = result.taxable_income - _pauschal_amount(result, config)
    return calculate_progressive_tax(result.taxable_income, brackets) - calculate_progressive_tax(
        reduced, brackets
    )


PRACTICE_TIP_RULES: tuple[TipRule[TaxCalculationResult], ...] = (
    TipRule(
        id="high_effective_rate",
        type="warning",
        message_key="tips.high_effective_rate",
        applies=lambda result, config: (
            result.effective_tax_rate > config.tips.high_effective_rate
        ),
        message_values=lambda result, config: {
            "threshold": format_percentage(config.tips.high_effective_rate / 100)
        },
    ),
    TipRule(
        id="pauschalierung",
        type="tip",
        message_key="tips.pauschalierung",
        applies=lambda result, config: (
            not result.applying_pauschalierung
            and result.gross_revenue < config.practice.flat_rate.revenue_ceiling
            and result.profit > 0
        ),
        message_values=lambda result, config: {
            "rate": format_percentage(config.practice.flat_rate.rate),
            "amount": format_euro_at(_pauschal_amount(result, config)),
        },
        savings=_pauschal_savings,
    ),
    TipRule(
        id="high_social_security",
        type="info",
        message_key="tips.high_social_security",
        applies=lambda result, config: (
            result.profit > 0
            and result.sv_beitraege > result.profit * config.tips.high_social_security_share
        ),
    ),
    TipRule(
        id="strong_net_income",
        type="success",
        message_key="tips.strong_net_income",
        applies=lambda result, config: result.net_income > config.tips.strong_net_income,
    ),
    TipRule(
        id="low_profit",
        type="warning",
        message_key="tips.low_profit",
        applies=lambda result, config: result.profit < config.tips.low_profit,
    ),
    TipRule(
        id="small_business_threshold",
        type="info",
        message_key="tips.small_business_threshold",
        applies=lambda result, config: (
            result.practice_type != "kassenarzt"
            and result.small_business_exempt
            and result.vat_relevant_revenue
            >= config.practice.vat.small_business_threshold
            * config.tips.small_business_warning_share
        ),
        message_values=lambda result, config: {
            "threshold": format_euro_at(config.practice.vat.small_business_threshold)
        },
    ),
)


def _marginal_savings(amount: float, result: ComprehensiveTaxResult) -> float:
    return amount * result.marginal_tax_rate / 100


COMPREHENSIVE_TIP_RULES: tuple[TipRule[ComprehensiveTaxResult], ...] = (
    TipRule(
        id="high_effective_rate",
        type="warning",
        message_key="tips.comprehensive.high_effective_rate",
        applies=lambda result, config: (
            result.effective_tax_rate > config.tips.high_effective_rate
        ),
        message_values=lambda result, config: {
            "rate": format_percentage(result.effective_tax_rate / 100)
        },
    ),
    TipRule(
        id="gewinnfreibetrag_applied",
        type="success",
        message_key="tips.comprehensive.gewinnfreibetrag_applied",
        applies=lambda result, config: (
            0
            < result.self_employment_profit
            < config.comprehensive.deduction_limits.gewinnfreibetrag_limit
            and result.gewinnfreibetrag > 0
        ),
        message_values=lambda result, config: {
            "rate": format_percentage(
                config.comprehensive.deduction_limits.gewinnfreibetrag_rate
            ),
            "savings": format_euro_at(_marginal_savings(result.gewinnfreibetrag, result)),
        },
        savings=lambda result, config: _marginal_savings(result.gewinnfreibetrag, result),
    ),
    TipRule(
        id="strong_net_income",
        type="success",
        message_key="tips.comprehensive.strong_net_income",
        applies=lambda result, config: result.net_income > config.tips.strong_net_income,
        message_values=lambda result, config: {
            "threshold": format_euro_at(config.tips.strong_net_income)
        },
    ),
    TipRule(
        id="low_profit",
        type="warning",
        message_key="tips.comprehensive.low_profit",
        applies=lambda result, config: (
            0 < result.self_employment_profit < config.tips.low_profit
        ),
        message_values=lambda result, config: {
            "threshold": format_euro_at(config.tips.low_profit)
        },
    ),
    TipRule(
        id="high_marginal_rate",
        type="info",
        message_key="tips.comprehensive.high_marginal_rate",
        applies=lambda result, config: (
            result.marginal_tax_rate >= config.tips.high_marginal_rate
        ),
        message_values=lambda result, config: {
            "rate": format_percentage(result.marginal_tax_rate / 100)
        },
    ),
    TipRule(
        id="pension_opportunity",
        type="tip",
        message_key="tips.comprehensive.pension_opportunity",
        applies=lambda result, config: (
            result.total_gross_income > config.tips.pension_opportunity_income
        ),
        message_values=lambda result, config: {
            "limit": format_euro_at(
                config.comprehensive.deduction_limits.pension_contribution_max
            ),
            "savings": format_euro_at(
                _marginal_savings(
                    config.comprehensive.deduction_limits.pension_contribution_max, result
                )
            ),
        },
        savings=lambda result, config: _marginal_savings(
            config.comprehensive.deduction_limits.pension_contribution_max, result
        ),
    ),
)


def _run_rules(
    rules: Sequence[TipRule[ResultT]],
    result: ResultT,
    config: YearConfiguration,
    translator: Translator,
) -> list[TaxOptimizationTip]:
    tips: list[TaxOptimizationTip] = []
    for rule in rules:
        tip = rule.evaluate(result, config, translator)
        if tip is not None:
            tips.append(tip)
    return tips


def evaluate_tip_rules(
    result: TaxCalculationResult,
    config: YearConfiguration | None = None,
    locale: str | None = "de",
) -> list[TaxOptimizationTip]:
    """Return structured tips for a practice result."""

    config = config if config is not None else load_year_configuration(result.year)
    return _run_rules(PRACTICE_TIP_RULES, result, config, get_translator(locale))


def get_tax_optimization_tips(
    result: TaxCalculationResult,
    config: YearConfiguration | None = None,
    locale: str | None = "de",
) -> list[str]:
    """Return the tip messages for a practice result, German by default."""

    return [tip.message for tip in evaluate_tip_rules(result, config, locale)]


def generate_comprehensive_tips(
    result: ComprehensiveTaxResult,
    config: YearConfiguration | None = None,
    locale: str | None = "de",
) -> list[TaxOptimizationTip]:
    """Return structured tips for a comprehensive result."""

    config = config if config is not None else load_year_configuration(result.tax_year)
    return _run_rules(COMPREHENSIVE_TIP_RULES, result, config, get_translator(locale))


__all__ = [
    "COMPREHENSIVE_TIP_RULES",
    "PRACTICE_TIP_RULES",
    "TipRule",
    "evaluate_tip_rules",
    "generate_comprehensive_tips",
    "get_tax_optimization_tips",
]
