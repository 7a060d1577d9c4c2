"""Expose year configuration metadata consumed by front-end clients.

The endpoints publish the YAML-backed tax parameters so that forms can show
brackets, thresholds and deadlines without duplicating the rules.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from flask import Blueprint, jsonify, request

from praxistax.backend.app.http import unknown_year
from praxistax.backend.app.localization import get_translator
from praxistax.backend.config.year_config import (
    YearConfiguration,
    available_years,
    load_manifest,
    load_year_configuration,
)
from praxistax.backend.services import resolve_request_locale
from praxistax.backend.services.calculators import (
    compare_years,
    format_percentage,
    get_tax_deadlines,
)
from praxistax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    return {
        "version": get_project_version(),
        "supported_years": list(manifest.supported_years),
        "default_year": manifest.default_year,
    }


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    entry = load_manifest().get_entry(config.year)
    practice = config.practice
    return {
        "year": config.year,
        "status": entry.status,
        "notes_url": entry.notes_url,
        "meta": dict(config.meta),
        "income_tax": {
            "tax_free_threshold": config.income_tax.tax_free_threshold,
            "brackets": [
                {
                    "upper": bracket.upper_bound,
                    "rate": bracket.rate,
                    "rate_label": format_percentage(bracket.rate),
                    "description": bracket.description,
                }
                for bracket in config.income_tax.brackets
            ],
        },
        "practice": practice.model_dump(mode="json"),
        "comprehensive": config.comprehensive.model_dump(mode="json"),
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return every configured year with its tax parameters."""

    metadata = get_configuration_metadata()
    payload = {
        "years": [_serialise_year(load_year_configuration(year)) for year in available_years()],
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/deadlines")
def get_deadlines(year: int) -> tuple[Any, int]:
    """Return the income tax calendar for ``year`` with localized descriptions."""

    if year not in available_years():
        return unknown_year(year).to_response()

    translator = get_translator(resolve_request_locale(request))
    payload = {
        "year": year,
        "locale": translator.locale,
        "deadlines": [asdict(deadline) for deadline in get_tax_deadlines(year, translator)],
    }
    return jsonify(payload), 200


@blueprint.get("/compare/<int:year1>/<int:year2>")
def get_year_comparison(year1: int, year2: int) -> tuple[Any, int]:
    """Return headline parameters for two years side by side."""

    for year in (year1, year2):
        if year not in available_years():
            return unknown_year(year).to_response()

    comparison = compare_years(year1, year2)
    changes = {
        key: {str(year): value for year, value in values.items()}
        for key, values in comparison.changes.items()
    }
    payload = {"year1": comparison.year1, "year2": comparison.year2, "changes": changes}
    return jsonify(payload), 200
