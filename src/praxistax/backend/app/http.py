"""JSON error payloads shared by the Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import jsonify


@dataclass(frozen=True)
class ProblemResponse:
    """Error payload of the form ``{"error": ..., "message": ...}``."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse`; keyword extras are merged into the body."""

    return ProblemResponse(error=error, status=status, message=message, extra=extra or None)


def unknown_year(year: int) -> ProblemResponse:
    """Return the 404 payload for a tax year missing from the manifest."""

    return problem_response(
        "not_found",
        status=404,
        message=f"Tax year {year} is not configured",
        year=year,
    )


__all__ = ["ProblemResponse", "problem_response", "unknown_year"]
