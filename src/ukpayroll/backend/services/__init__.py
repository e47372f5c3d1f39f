"""Service-layer helpers for the payroll backend."""

from ukpayroll.backend.app.services.calculation_service import calculate, calculate_payroll

from .request_parser import parse_calculation_payload

__all__ = [
    "calculate",
    "calculate_payroll",
    "parse_calculation_payload",
]
