"""Problem payloads returned by the Flask blueprints and error handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify
from werkzeug.exceptions import BadRequest

from ukpayroll.backend.config.schema import UnknownTaxYear


@dataclass(frozen=True)
class ProblemResponse:
    """RFC 7807-style error body: a stable ``error`` code plus a message."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error, "status": self.status}
        if self.message:
            payload["message"] = self.message
        payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    return ProblemResponse(error=error, status=status, message=message, extra=extra)


def problem_for_exception(exc: Exception) -> ProblemResponse:
    """Map a domain or request exception onto its problem payload."""

    if isinstance(exc, UnknownTaxYear):
        return problem_response(
            "unknown_tax_year",
            status=HTTPStatus.BAD_REQUEST,
            message=str(exc),
            tax_year=exc.tax_year,
        )
    if isinstance(exc, BadRequest):
        return problem_response(
            "bad_request",
            status=HTTPStatus.BAD_REQUEST,
            message=exc.description or "Invalid request",
        )
    return problem_response(
        "validation_error", status=HTTPStatus.BAD_REQUEST, message=str(exc)
    )


__all__ = ["ProblemResponse", "problem_for_exception", "problem_response"]
