"""Annual totals and presentation breakdown derived from the monthly series."""

from __future__ import annotations

from collections.abc import Sequence

from ukpayroll.backend.app.models import (
    BreakdownEntry,
    CalculationResult,
    MonthlyResult,
    Region,
)

BREAKDOWN_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("take_home", "Take-Home Pay"),
    ("tax", "Income Tax"),
    ("nic", "National Insurance"),
    ("pension", "Pension"),
)


def _total(months: Sequence[MonthlyResult], field: str) -> float:
    return sum(getattr(month, field) for month in months)


def effective_tax_rate(gross: float, tax: float, nic: float) -> float:
    """Income tax plus NIC as a percentage of gross pay."""

    if gross <= 0:
        return 0.0
    return (tax + nic) / gross * 100


def aggregate_results(
    months: Sequence[MonthlyResult],
    *,
    tax_year: str,
    region: Region,
    personal_allowance: float,
    taxable_income: float,
    adjusted_net_income: float,
    suggested_tax_code: str,
) -> CalculationResult:
    """Sum ``months`` into annual totals.

    Annual figures are always sums of the monthly entries so the two views
    reconcile exactly.
    """

    totals = {
        field: _total(months, field)
        for field in ("gross", "tax", "nic", "pension", "take_home")
    }
    breakdown = tuple(
        BreakdownEntry(key=key, label=label, value=totals[key])
        for key, label in BREAKDOWN_CATEGORIES
    )

    return CalculationResult(
        tax_year=tax_year,
        region=region,
        gross=totals["gross"],
        tax=totals["tax"],
        nic=totals["nic"],
        pension=totals["pension"],
        take_home=totals["take_home"],
        effective_tax_rate=effective_tax_rate(
            totals["gross"], totals["tax"], totals["nic"]
        ),
        personal_allowance=personal_allowance,
        taxable_income=taxable_income,
        adjusted_net_income=adjusted_net_income,
        suggested_tax_code=suggested_tax_code,
        months=tuple(months),
        breakdown=breakdown,
    )
