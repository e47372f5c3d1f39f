"""Typed input and result records shared across the payroll services.

Requests arrive as the Pydantic ``CalculationRequest`` and are converted into
the frozen ``CalculationInput`` consumed by the engine. Derived results are
plain frozen dataclasses: every record is built fresh for a single
calculation and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from .api import (
    TAX_YEAR_PATTERN,
    AdjustedCalculation,
    BreakdownItem,
    CalculationRequest,
    CalculationResponse,
    Month,
    MonthlyEntry,
    Region,
    ResponseMeta,
    Summary,
    SummaryLabels,
    format_validation_error,
)

__all__ = [
    "AdjustedCalculation",
    "BreakdownEntry",
    "BreakdownItem",
    "CalculationInput",
    "CalculationRequest",
    "CalculationResponse",
    "CalculationResult",
    "Month",
    "MonthlyEntry",
    "MonthlyResult",
    "Region",
    "ResponseMeta",
    "Summary",
    "SummaryLabels",
    "TAX_YEAR_PATTERN",
    "format_validation_error",
]


class CalculationInput(BaseModel):
    """Validated income profile for a single tax year.

    Amounts are annual pounds and percentages are expressed on a 0-100 scale.
    Range checks happen upstream in ``CalculationRequest``; the engine trusts
    these values as given.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    tax_year: str
    salary: float
    bonus: float = 0.0
    bonus_month: Month = Month.APRIL
    has_pay_rise: bool = False
    new_salary: float | None = None
    pay_rise_month: Month = Month.APRIL
    pension_contribution: float = 0.0
    is_bonus_pensionable: bool = False
    pensionable_bonus_percentage: float = 0.0
    taxable_benefits: float = 0.0
    tax_code: str = "1257L"
    region: Region = Region.ENGLAND
    blind: bool = False

    @property
    def pay_rise_applies(self) -> bool:
        """Only an increase is paid from the rise month; cuts are ignored."""

        return (
            self.has_pay_rise
            and self.new_salary is not None
            and self.new_salary > self.salary
        )

    @property
    def pay_rise_position(self) -> int | None:
        """Month position from which the new salary is paid, if any."""

        if not self.pay_rise_applies:
            return None
        return self.pay_rise_month.position

    @property
    def bonus_position(self) -> int | None:
        if self.bonus <= 0:
            return None
        return self.bonus_month.position

    @property
    def pension_rate(self) -> float:
        return self.pension_contribution / 100

    @property
    def pensionable_bonus_share(self) -> float:
        """Part of the bonus on which pension contributions are taken.

        The share is zero unless a ``pensionable_bonus_percentage`` is given,
        even when ``is_bonus_pensionable`` is set.
        """

        if not self.is_bonus_pensionable:
            return 0.0
        return self.bonus * self.pensionable_bonus_percentage / 100


@dataclass(frozen=True, slots=True)
class MonthlyResult:
    """Payroll figures for one month of the tax year."""

    month: Month
    gross: float
    pension: float
    tax: float
    nic: float
    take_home: float


@dataclass(frozen=True, slots=True)
class BreakdownEntry:
    """Annual total for one presentation category."""

    key: str
    label: str
    value: float


@dataclass(frozen=True, slots=True)
class CalculationResult:
    """Annual aggregates and monthly series produced by the engine."""

    tax_year: str
    region: Region
    gross: float
    tax: float
    nic: float
    pension: float
    take_home: float
    effective_tax_rate: float
    personal_allowance: float
    taxable_income: float
    adjusted_net_income: float
    suggested_tax_code: str
    months: tuple[MonthlyResult, ...]
    breakdown: tuple[BreakdownEntry, ...]

    @property
    def monthly_take_home(self) -> float:
        return self.take_home / 12
