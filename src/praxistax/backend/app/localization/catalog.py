"""Translation catalogue helpers backed by packaged JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any, Mapping

_BASE_LOCALE = "de"
_TRANSLATIONS_PACKAGE = "praxistax.translations"


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings.

    Messages may contain ``str.format`` placeholders; keyword arguments passed
    to the call are substituted into the resolved template.
    """

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str, **values: Any) -> str:
        template = self._messages.get(key) or self._fallback.get(key, key)
        if not values:
            return template
        return template.format(**values)


@dataclass(frozen=True)
class Catalogue:
    """Representation of a locale catalogue backed by the packaged resources."""

    locale: str
    messages: Mapping[str, str]


@cache
def _available_locales() -> tuple[str, ...]:
    """Return the set of locales with published translation payloads."""

    try:
        root = resources.files(_TRANSLATIONS_PACKAGE)
    except ModuleNotFoundError:  # pragma: no cover - defensive fallback
        return (_BASE_LOCALE,)

    locales = sorted(
        entry.name[: -len(".json")]
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )
    return tuple(locales) or (_BASE_LOCALE,)


@cache
def _read_catalogue_payload(locale: str) -> dict[str, Any]:
    """Load the raw message mapping for the requested locale."""

    try:
        resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    except ModuleNotFoundError:  # pragma: no cover - defensive fallback
        return {}

    if not resource.is_file():
        return {}

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    backend = payload.get("backend") or {}
    if not isinstance(backend, dict):  # pragma: no cover - defensive guard
        backend = {}
    return backend


@cache
def _load_catalogue(locale: str) -> Catalogue:
    """Return a cached catalogue representation for the locale."""

    payload = _read_catalogue_payload(locale)
    messages = {key: str(value) for key, value in payload.items()}
    return Catalogue(locale=locale, messages=messages)


def available_locales() -> tuple[str, ...]:
    """Expose the locales that ship a catalogue."""

    return _available_locales()


def normalise_locale(locale: str | None) -> str:
    """Normalise requested locale to a supported catalogue key."""

    if not locale:
        return _BASE_LOCALE

    normalized = locale.strip().lower().replace("_", "-").split("-")[0]
    return normalized if normalized in _available_locales() else _BASE_LOCALE


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator instance for the requested locale."""

    normalized = normalise_locale(locale)
    catalogue = _load_catalogue(normalized)
    fallback = _load_catalogue(_BASE_LOCALE)
    fallback_messages = fallback.messages if normalized != _BASE_LOCALE else catalogue.messages

    return Translator(
        locale=catalogue.locale,
        _messages=catalogue.messages,
        _fallback=fallback_messages,
    )


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Expose catalogue messages for API consumers."""

    normalized = normalise_locale(locale)
    catalogue = _load_catalogue(normalized)
    fallback = _load_catalogue(_BASE_LOCALE)

    return {
        "locale": normalized,
        "available_locales": list(_available_locales()),
        "messages": dict(catalogue.messages),
        "fallback": {
            "locale": _BASE_LOCALE,
            "messages": dict(fallback.messages),
        },
    }


__all__ = [
    "Translator",
    "Catalogue",
    "available_locales",
    "get_translator",
    "load_translations",
    "normalise_locale",
]
