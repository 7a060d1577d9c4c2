"""Domain-specific calculation helpers."""

from .comparison import compare_scenarios, compare_years
from .comprehensive import (
    calculate_comprehensive_tax,
    calculate_monthly_progress,
    quick_tax_estimate,
)
from .practice import (
    calculate_aerztekammer_beitrag,
    calculate_austrian_tax,
    calculate_income_tax,
    calculate_pauschal_deduction,
    calculate_sv_beitraege,
    calculate_vat,
)
from .prepayments import calculate_quarterly_vorauszahlungen, get_tax_deadlines
from .tips import evaluate_tip_rules, generate_comprehensive_tips, get_tax_optimization_tips
from .utils import (
    calculate_progressive_tax,
    format_euro_at,
    format_percentage,
    round_currency,
    round_rate,
)

__all__ = [
    "calculate_aerztekammer_beitrag",
    "calculate_austrian_tax",
    "calculate_comprehensive_tax",
    "calculate_income_tax",
    "calculate_monthly_progress",
    "calculate_pauschal_deduction",
    "calculate_progressive_tax",
    "calculate_quarterly_vorauszahlungen",
    "calculate_sv_beitraege",
    "calculate_vat",
    "compare_scenarios",
    "compare_years",
    "evaluate_tip_rules",
    "format_euro_at",
    "format_percentage",
    "generate_comprehensive_tips",
    "get_tax_deadlines",
    "get_tax_optimization_tips",
    "quick_tax_estimate",
    "round_currency",
    "round_rate",
]
