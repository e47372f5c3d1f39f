"""Pydantic models describing the public API surface."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ukpayroll.backend.config.schema import BandScheduleKey

__all__ = [
    "Month",
    "Region",
    "CalculationRequest",
    "SummaryLabels",
    "Summary",
    "MonthlyEntry",
    "BreakdownItem",
    "ResponseMeta",
    "AdjustedCalculation",
    "CalculationResponse",
    "format_validation_error",
    "TAX_YEAR_PATTERN",
]


TAX_YEAR_PATTERN = r"^\d{4}/\d{2}$"


class Region(str, Enum):
    """UK nations with their own income tax band schedule assignment."""

    ENGLAND = "England"
    SCOTLAND = "Scotland"
    WALES = "Wales"
    NORTHERN_IRELAND = "NorthernIreland"

    @property
    def schedule_key(self) -> BandScheduleKey:
        return _REGION_SCHEDULES[self]

    @classmethod
    def _missing_(cls, value: object) -> Region | None:
        if not isinstance(value, str):
            return None
        compact = value.replace(" ", "").replace("_", "").lower()
        for member in cls:
            if member.value.lower() == compact:
                return member
        return None


_REGION_SCHEDULES: dict[Region, BandScheduleKey] = {
    Region.ENGLAND: BandScheduleKey.ENGLAND_WALES_NI,
    Region.WALES: BandScheduleKey.ENGLAND_WALES_NI,
    Region.NORTHERN_IRELAND: BandScheduleKey.ENGLAND_WALES_NI,
    Region.SCOTLAND: BandScheduleKey.SCOTLAND,
}


class Month(str, Enum):
    """Calendar months in tax-year order (April first)."""

    APRIL = "April"
    MAY = "May"
    JUNE = "June"
    JULY = "July"
    AUGUST = "August"
    SEPTEMBER = "September"
    OCTOBER = "October"
    NOVEMBER = "November"
    DECEMBER = "December"
    JANUARY = "January"
    FEBRUARY = "February"
    MARCH = "March"

    @property
    def position(self) -> int:
        """Zero-based position of the month within the tax year."""

        return list(Month).index(self)

    @classmethod
    def from_position(cls, position: int) -> Month:
        return list(cls)[position]

    @classmethod
    def _missing_(cls, value: object) -> Month | None:
        if not isinstance(value, str):
            return None
        normalised = value.strip().lower()
        for member in cls:
            if member.value.lower() == normalised:
                return member
        return None


class CalculationRequest(BaseModel):
    """Complete payload accepted by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid")

    tax_year: str = Field(..., pattern=TAX_YEAR_PATTERN)
    salary: float = Field(..., ge=0)
    bonus: float = Field(default=0.0, ge=0)
    bonus_month: Month = Month.APRIL
    has_pay_rise: bool = False
    new_salary: float | None = Field(default=None, ge=0)
    pay_rise_month: Month = Month.APRIL
    pension_contribution: float = Field(default=0.0, ge=0, le=100)
    adjusted_pension_contribution: float | None = Field(default=None, ge=0, le=100)
    is_bonus_pensionable: bool = False
    pensionable_bonus_percentage: float = Field(default=0.0, ge=0, le=100)
    taxable_benefits: float = Field(default=0.0, ge=0)
    tax_code: str = "1257L"
    region: Region | None = None
    blind: bool = False

    @field_validator("tax_year", mode="before")
    @classmethod
    def _normalise_tax_year(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().replace("-", "/")
        return value

    @field_validator("tax_code", mode="before")
    @classmethod
    def _normalise_tax_code(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip().upper()

    @field_validator("bonus_month", "pay_rise_month", mode="before")
    @classmethod
    def _coerce_month(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Month(value)
        return value

    @field_validator("region", mode="before")
    @classmethod
    def _coerce_region(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Region(value) if value.strip() else None
        return value

    @field_validator("bonus", "taxable_benefits", "pension_contribution", mode="before")
    @classmethod
    def _default_missing_amounts(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @model_validator(mode="after")
    def _require_new_salary(self) -> CalculationRequest:
        if self.has_pay_rise and self.new_salary is None:
            raise ValueError("new_salary is required when has_pay_rise is set")
        return self


class SummaryLabels(BaseModel):
    """Display labels for summary fields."""

    model_config = ConfigDict(extra="forbid")

    gross_income: str = "Gross income"
    income_tax: str = "Income Tax"
    national_insurance: str = "National Insurance"
    pension: str = "Pension"
    take_home: str = "Take-Home Pay"
    effective_tax_rate: str = "Effective tax rate"
    personal_allowance: str = "Personal allowance"


class Summary(BaseModel):
    """Aggregated annual calculation results."""

    model_config = ConfigDict(extra="forbid")

    gross_income: float
    income_tax: float
    national_insurance: float
    pension: float
    take_home: float
    effective_tax_rate: float
    personal_allowance: float
    taxable_income: float
    adjusted_net_income: float
    monthly_take_home: float
    suggested_tax_code: str | None = None
    labels: SummaryLabels = Field(default_factory=SummaryLabels)


class MonthlyEntry(BaseModel):
    """A single month of the payroll breakdown."""

    model_config = ConfigDict(extra="forbid")

    month: Month
    gross: float
    pension: float
    tax: float
    nic: float
    take_home: float


class BreakdownItem(BaseModel):
    """Annual category totals for charting."""

    model_config = ConfigDict(extra="forbid")

    key: str
    label: str
    value: float


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    tax_year: str
    region: Region
    tax_code: str


class AdjustedCalculation(BaseModel):
    """The same income profile recalculated at another pension rate."""

    model_config = ConfigDict(extra="forbid")

    pension_contribution: float
    summary: Summary
    monthly: list[MonthlyEntry]
    breakdown: list[BreakdownItem]


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    monthly: list[MonthlyEntry]
    breakdown: list[BreakdownItem]
    meta: ResponseMeta
    adjusted: AdjustedCalculation | None = None


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
