"""REST endpoints for payroll calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from ukpayroll.backend.services import calculate_payroll, parse_calculation_payload

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Run a payroll calculation for the submitted JSON payload."""

    payload = parse_calculation_payload(request)
    result = calculate_payroll(payload)

    return jsonify(result), 200
