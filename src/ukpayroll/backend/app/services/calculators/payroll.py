"""Cumulative (year-to-date) PAYE simulation across the twelve tax months.

The simulation is a fold: each month takes the previous
:class:`PayrollAccumulator` and returns a new one alongside that month's
:class:`MonthlyResult`. Tax and NIC for a month are the increase in the
year-to-date liability, so the figures depend on every earlier month and the
months are always processed April to March.
"""

from __future__ import annotations

from dataclasses import dataclass

from ukpayroll.backend.app.models import CalculationInput, Month, MonthlyResult
from ukpayroll.backend.config.year_config import (
    NationalInsuranceConfig,
    TaxBand,
    YearConfiguration,
)

from .allowance import apply_blind_persons_allowance, calculate_personal_allowance
from .national_insurance import calculate_national_insurance
from .pension import (
    MONTHS_PER_YEAR,
    active_salary,
    annual_pension_for_allowance,
    back_pay,
    bonus_paid,
    monthly_pension,
)
from .tax_code import parse_tax_code
from .utils import calculate_progressive_tax


@dataclass(frozen=True, slots=True)
class PayrollAccumulator:
    """Year-to-date running totals carried between months."""

    gross: float = 0.0
    tax: float = 0.0
    nic: float = 0.0
    pension: float = 0.0
    taxable_income: float = 0.0


@dataclass(frozen=True, slots=True)
class PayrollContext:
    """Values fixed for the whole year before the monthly fold starts."""

    data: CalculationInput
    personal_allowance: float
    adjusted_net_income: float
    bands: tuple[TaxBand, ...]
    national_insurance: NationalInsuranceConfig


def monthly_gross(data: CalculationInput, position: int) -> float:
    """Gross pay for the month: salary share, back-pay and any bonus."""

    return (
        active_salary(data, position) / MONTHS_PER_YEAR
        + back_pay(data, position)
        + bonus_paid(data, position)
    )


def annual_gross_income(data: CalculationInput) -> float:
    total = 0.0
    for position in range(MONTHS_PER_YEAR):
        total += monthly_gross(data, position)
    return total


def build_payroll_context(
    data: CalculationInput, config: YearConfiguration
) -> PayrollContext:
    """Resolve the annual personal allowance ahead of the monthly pass.

    Adjusted net income uses the annual pension estimate, which leaves out
    contributions on back-pay.
    """

    pension_for_allowance = annual_pension_for_allowance(data)
    adjusted_net_income = (
        annual_gross_income(data) + data.taxable_benefits - pension_for_allowance
    )

    base_allowance = parse_tax_code(data.tax_code, config.personal_allowance_default)
    allowance = calculate_personal_allowance(
        adjusted_net_income, base_allowance, config.pa_taper_threshold
    )
    allowance = apply_blind_persons_allowance(
        allowance, data.blind, config.blind_persons_allowance
    )

    return PayrollContext(
        data=data,
        personal_allowance=allowance,
        adjusted_net_income=adjusted_net_income,
        bands=config.bands_for(data.region.schedule_key),
        national_insurance=config.national_insurance,
    )


def advance_month(
    context: PayrollContext, accumulator: PayrollAccumulator, month: Month
) -> tuple[PayrollAccumulator, MonthlyResult]:
    """Compute ``month`` and return the updated running totals with its result."""

    data = context.data
    position = month.position
    elapsed = position + 1

    gross = monthly_gross(data, position)
    pension = monthly_pension(data, position)

    ytd_gross = accumulator.gross + gross
    ytd_pension = accumulator.pension + pension
    ytd_benefits = data.taxable_benefits / MONTHS_PER_YEAR * elapsed
    ytd_allowance = context.personal_allowance / MONTHS_PER_YEAR * elapsed
    ytd_taxable = max(0.0, ytd_gross + ytd_benefits - ytd_pension - ytd_allowance)

    ytd_tax = calculate_progressive_tax(ytd_taxable, context.bands)
    tax = max(0.0, ytd_tax - accumulator.tax)

    ytd_nic = calculate_national_insurance(ytd_gross, context.national_insurance)
    nic = max(0.0, ytd_nic - accumulator.nic)

    result = MonthlyResult(
        month=month,
        gross=gross,
        pension=pension,
        tax=tax,
        nic=nic,
        take_home=gross - tax - nic - pension,
    )
    updated = PayrollAccumulator(
        gross=ytd_gross,
        tax=accumulator.tax + tax,
        nic=accumulator.nic + nic,
        pension=ytd_pension,
        taxable_income=ytd_taxable,
    )
    return updated, result


def simulate_year(
    context: PayrollContext,
) -> tuple[PayrollAccumulator, tuple[MonthlyResult, ...]]:
    """Run the twelve months in order and return the final totals and results."""

    accumulator = PayrollAccumulator()
    results: list[MonthlyResult] = []
    for month in Month:
        accumulator, result = advance_month(context, accumulator, month)
        results.append(result)
    return accumulator, tuple(results)
