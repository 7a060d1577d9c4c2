"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from praxistax.backend.app.localization import normalise_locale


def resolve_request_locale(req: Request, payload: Mapping[str, Any] | None = None) -> str | None:
    """Return the locale hinted by ``payload``, ``?locale=`` or ``Accept-Language``.

    The body wins over the query string, which wins over the header. ``None``
    means the client expressed no preference.
    """

    locale = payload.get("locale") if payload is not None else None
    if isinstance(locale, str) and locale.strip():
        return normalise_locale(locale)

    locale_param = req.args.get("locale")
    if locale_param:
        return normalise_locale(locale_param)

    accept_language = req.headers.get("Accept-Language")
    if accept_language:
        primary = accept_language.split(",")[0].split(";")[0].strip()
        if primary:
            return normalise_locale(primary)
    return None


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON object from ``req`` and settle its locale."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    locale = resolve_request_locale(req, payload)
    if locale is not None:
        payload["locale"] = locale

    return payload
