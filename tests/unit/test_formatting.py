"""Tests for the Austrian currency and percentage formatting helpers."""

from __future__ import annotations

import pytest

from praxistax.backend.services.calculators import format_euro_at, format_percentage


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (0, "€ 0"),
        (999, "€ 999"),
        (1_000, "€ 1.000"),
        (25_526.3, "€ 25.526"),
        (1_234_567.89, "€ 1.234.568"),
        (999.5, "€ 1.000"),
        (0.5, "€ 1"),
        (-1_500, "-€ 1.500"),
        (-0.5, "-€ 1"),
        (-0.4, "€ 0"),
        (1e30, "€ 1" + ".000" * 10),
        (-1e30, "-€ 1" + ".000" * 10),
    ],
)
def test_format_euro_at(amount: float, expected: str) -> None:
    assert format_euro_at(amount) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.13, "13%"), (0.45, "45%"), (0.125, "12.50%"), (0.5746, "57.46%"), (0, "0%")],
)
def test_format_percentage(value: float, expected: str) -> None:
    assert format_percentage(value) == expected


def test_format_euro_at_passes_non_finite_values_through() -> None:
    assert format_euro_at(float("inf")) == "€ inf"
    assert format_euro_at(float("-inf")) == "-€ inf"
