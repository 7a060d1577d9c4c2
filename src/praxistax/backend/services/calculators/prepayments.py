"""Quarterly prepayments (Vorauszahlungen) and the annual deadline calendar."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from praxistax.backend.app.localization import Translator, get_translator
from praxistax.backend.app.models import QuarterlySplit, TaxDeadline

# Prepayments fall due on the 15th of the middle month of each quarter.
_PREPAYMENT_DATES = ("02-15", "05-15", "08-15", "11-15")


def calculate_quarterly_vorauszahlungen(
    annual_income_tax: float, *, precision: int | None = None
) -> QuarterlySplit:
    """Split ``annual_income_tax`` into four prepayments.

    The fourth quarter is derived as ``total - (q1 + q2 + q3)`` so the quarters
    always add up to ``total``. With ``precision`` the first three quarters are
    rounded half-up to that many decimals and the fourth absorbs the remainder.
    """

    if precision is None or not math.isfinite(annual_income_tax):
        share = annual_income_tax / 4
        first_three = share + share + share
        return QuarterlySplit(
            q1=share,
            q2=share,
            q3=share,
            q4=annual_income_tax - first_three,
            total=annual_income_tax,
        )

    amount = Decimal(str(annual_income_tax))
    quantum = Decimal(1).scaleb(-precision)
    with localcontext() as context:
        # Room for every integer digit plus the requested decimals.
        context.prec = max(context.prec, amount.adjusted() + precision + 3)
        total = amount.quantize(quantum, rounding=ROUND_HALF_UP)
        share = (total / 4).quantize(quantum, rounding=ROUND_HALF_UP)
        last = total - share * 3
    return QuarterlySplit(
        q1=float(share),
        q2=float(share),
        q3=float(share),
        q4=float(last),
        total=float(total),
    )


def get_tax_deadlines(year: int, translator: Translator | None = None) -> list[TaxDeadline]:
    """Return the income tax calendar for ``year`` in chronological order.

    Returns filed during ``year`` concern the previous assessment year.
    """

    translator = translator or get_translator()
    assessment_year = year - 1

    deadlines = [
        TaxDeadline(
            date=f"{year}-{suffix}",
            description=translator("deadlines.prepayment", quarter=index),
            type="payment",
            important=True,
        )
        for index, suffix in enumerate(_PREPAYMENT_DATES, start=1)
    ]
    deadlines.append(
        TaxDeadline(
            date=f"{year}-04-30",
            description=translator("deadlines.filing_paper", year=assessment_year),
            type="filing",
        )
    )
    deadlines.append(
        TaxDeadline(
            date=f"{year}-06-30",
            description=translator("deadlines.filing_online", year=assessment_year),
            type="filing",
            important=True,
        )
    )
    deadlines.append(
        TaxDeadline(
            date=f"{year}-12-31",
            description=translator("deadlines.year_end_review"),
            type="reminder",
        )
    )

    return sorted(deadlines, key=lambda deadline: deadline.date)


__all__ = ["calculate_quarterly_vorauszahlungen", "get_tax_deadlines"]
