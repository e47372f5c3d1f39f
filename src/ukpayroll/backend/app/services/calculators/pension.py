"""Pensionable income and employee pension contributions.

Two totals are produced. The annual figure used to taper the personal
allowance counts salary and the pensionable bonus share only, while the
monthly payroll figures also take contributions on pay-rise back-pay. The two
are kept separate and can differ whenever back-pay is paid.
"""

from __future__ import annotations

from ukpayroll.backend.app.models import CalculationInput

MONTHS_PER_YEAR = 12


def active_salary(data: CalculationInput, position: int) -> float:
    """Annual salary in force for the month at ``position``."""

    rise_from = data.pay_rise_position
    if rise_from is None or position < rise_from:
        return data.salary
    return data.new_salary  # type: ignore[return-value]


def back_pay(data: CalculationInput, position: int) -> float:
    """One-off arrears paid in the month the pay rise takes effect."""

    rise_from = data.pay_rise_position
    if rise_from is None or rise_from == 0 or position != rise_from:
        return 0.0
    difference = data.new_salary - data.salary  # type: ignore[operator]
    return difference / MONTHS_PER_YEAR * rise_from


def bonus_paid(data: CalculationInput, position: int) -> float:
    if data.bonus_position != position:
        return 0.0
    return data.bonus


def pensionable_bonus(data: CalculationInput, position: int) -> float:
    if data.bonus_position != position:
        return 0.0
    return data.pensionable_bonus_share


def annual_pension_for_allowance(data: CalculationInput) -> float:
    """Annual pension total used to derive adjusted net income."""

    pensionable = 0.0
    for position in range(MONTHS_PER_YEAR):
        pensionable += active_salary(data, position) / MONTHS_PER_YEAR
        pensionable += pensionable_bonus(data, position)
    return pensionable * data.pension_rate


def monthly_pension(data: CalculationInput, position: int) -> float:
    """Pension deducted through payroll in the month at ``position``."""

    pensionable = (
        active_salary(data, position) / MONTHS_PER_YEAR
        + back_pay(data, position)
        + pensionable_bonus(data, position)
    )
    return pensionable * data.pension_rate
