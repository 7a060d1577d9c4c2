"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from praxistax.backend.app.models import BracketBreakdownEntry
from praxistax.backend.config.year_config import TaxBracket


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def format_euro_at(amount: float) -> str:
    """Format ``amount`` the Austrian way: ``€ 1.000`` with whole euros.

    Rounding is half-up on the absolute value so that ``-0.5`` and ``0.5``
    mirror each other; negative amounts render as ``-€ 1.000``.
    """

    if not math.isfinite(amount):
        return f"{'-' if amount < 0 else ''}€ {abs(amount)}"

    whole = Decimal(str(abs(amount))).to_integral_value(rounding=ROUND_HALF_UP)
    grouped = f"{int(whole):,}".replace(",", ".")
    sign = "-" if amount < 0 and whole != 0 else ""
    return f"{sign}€ {grouped}"


def calculate_progressive_tax(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``."""

    if amount <= 0:
        return 0.0

    total = 0.0
    lower_bound = 0.0

    for bracket in brackets:
        upper = bracket.upper_bound
        if upper is None or amount < upper:
            total += (amount - lower_bound) * bracket.rate
            break

        total += (upper - lower_bound) * bracket.rate
        lower_bound = upper

    return total


def calculate_bracket_breakdown(
    amount: float, brackets: Sequence[TaxBracket]
) -> list[BracketBreakdownEntry]:
    """Return the tax charged per bracket for ``amount``.

    Only brackets that receive a positive slice of income are listed, so the
    tax-free band appears with a zero tax entry whenever income is positive.
    """

    entries: list[BracketBreakdownEntry] = []
    if amount <= 0:
        return entries

    lower_bound = 0.0
    for bracket in brackets:
        upper = bracket.upper_bound
        slice_top = amount if upper is None else min(amount, upper)
        taxable = slice_top - lower_bound
        if taxable <= 0:
            break

        entries.append(
            BracketBreakdownEntry(
                lower=lower_bound,
                upper=upper,
                rate=bracket.rate,
                taxable_amount=round_currency(taxable),
                tax=round_currency(taxable * bracket.rate),
            )
        )

        if upper is None or amount <= upper:
            break
        lower_bound = upper

    return entries


def marginal_rate(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Return the rate applied to the next euro of ``amount``."""

    for bracket in brackets:
        upper = bracket.upper_bound
        if upper is None or amount <= upper:
            return bracket.rate
    return brackets[-1].rate


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)


__all__ = [
    "calculate_bracket_breakdown",
    "calculate_progressive_tax",
    "format_euro_at",
    "format_percentage",
    "marginal_rate",
    "round_currency",
    "round_rate",
]
