"""Tests for the localisation catalogue helpers."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from praxistax.backend.app.localization import (
    available_locales,
    get_translator,
    load_translations,
    normalise_locale,
)

TRANSLATIONS_DIR = Path(__file__).resolve().parents[2] / "src" / "praxistax" / "translations"
PLACEHOLDER_PATTERN = re.compile(r"{([a-z_]+)}")


def _read_backend(locale: str) -> dict[str, str]:
    payload = json.loads(TRANSLATIONS_DIR.joinpath(f"{locale}.json").read_text(encoding="utf-8"))
    return payload["backend"]


def test_available_locales() -> None:
    assert available_locales() == ("de", "en")


@pytest.mark.parametrize(
    ("hint", "expected"),
    [(None, "de"), ("", "de"), ("EN", "en"), ("en_GB", "en"), ("de-AT", "de"), ("fr", "de")],
)
def test_normalise_locale(hint: str | None, expected: str) -> None:
    assert normalise_locale(hint) == expected


def test_get_translator_loads_catalogue() -> None:
    translator = get_translator("en")

    assert translator.locale == "en"
    assert translator("summary.income_tax") == _read_backend("en")["summary.income_tax"]


def test_unknown_locale_falls_back_to_german() -> None:
    translator = get_translator("fr")

    assert translator.locale == "de"
    assert translator("summary.profit") == "Gewinn"


def test_translator_formats_placeholders() -> None:
    translator = get_translator("de")

    assert translator("deadlines.prepayment", quarter=3) == "Einkommensteuer-Vorauszahlung Q3"


def test_unknown_key_is_returned_verbatim() -> None:
    assert get_translator("en")("summary.does_not_exist") == "summary.does_not_exist"


def test_load_translations_payload() -> None:
    payload = load_translations("en")

    assert payload["locale"] == "en"
    assert payload["available_locales"] == ["de", "en"]
    assert payload["messages"]["summary.profit"] == _read_backend("en")["summary.profit"]
    assert payload["fallback"]["locale"] == "de"
    assert payload["fallback"]["messages"]["summary.profit"] == "Gewinn"


def test_catalogues_share_keys_and_placeholders() -> None:
    german = _read_backend("de")
    english = _read_backend("en")

    assert set(german) == set(english)
    for key, message in german.items():
        assert set(PLACEHOLDER_PATTERN.findall(message)) == set(
            PLACEHOLDER_PATTERN.findall(english[key])
        ), key
