"""Domain-specific calculation helpers."""

from .aggregation import aggregate_results, effective_tax_rate
from .allowance import apply_blind_persons_allowance, calculate_personal_allowance
from .national_insurance import calculate_national_insurance
from .pension import annual_pension_for_allowance, back_pay, monthly_pension
from .payroll import (
    PayrollAccumulator,
    PayrollContext,
    advance_month,
    build_payroll_context,
    simulate_year,
)
from .tax_code import parse_tax_code, region_from_tax_code, suggest_tax_code
from .utils import calculate_progressive_tax, format_percentage, round_currency, round_rate

__all__ = [
    "PayrollAccumulator",
    "PayrollContext",
    "advance_month",
    "aggregate_results",
    "annual_pension_for_allowance",
    "apply_blind_persons_allowance",
    "back_pay",
    "build_payroll_context",
    "calculate_national_insurance",
    "calculate_personal_allowance",
    "calculate_progressive_tax",
    "effective_tax_rate",
    "format_percentage",
    "monthly_pension",
    "parse_tax_code",
    "region_from_tax_code",
    "round_currency",
    "round_rate",
    "simulate_year",
    "suggest_tax_code",
]
