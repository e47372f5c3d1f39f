"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest


def _resolve_tax_year(req: Request, payload: dict[str, Any]) -> None:
    """Populate ``tax_year`` from the query string when the body omits it."""

    tax_year = payload.get("tax_year")
    if isinstance(tax_year, str) and tax_year.strip():
        return

    tax_year_param = req.args.get("tax_year")
    if tax_year_param:
        payload["tax_year"] = tax_year_param.strip()


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract and validate a JSON payload from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_tax_year(req, payload)

    return payload
