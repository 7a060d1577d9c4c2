"""Expose translation catalogues to front-end consumers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from praxistax.backend.app.localization import load_translations
from praxistax.backend.services import resolve_request_locale

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


@blueprint.get("/")
def get_default_translations():
    """Return translations for the locale hinted by the request, German otherwise."""

    payload = load_translations(resolve_request_locale(request))
    return jsonify(payload), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    payload = load_translations(locale)
    return jsonify(payload), 200
