"""Orchestrate request validation, payroll simulation, and response shaping.

``calculate`` is the engine entry point: a pure function from a validated
``CalculationInput`` to a ``CalculationResult``. ``calculate_payroll`` wraps it
for raw payloads, converting validation failures into ``ValueError`` and
serialising the result into JSON-ready data for the HTTP layer.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from ukpayroll.backend.app.models import (
    CalculationInput,
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    Region,
    format_validation_error,
)
from ukpayroll.backend.config.year_config import (
    YearConfiguration,
    load_year_configuration,
)

from .calculators import (
    aggregate_results,
    build_payroll_context,
    region_from_tax_code,
    round_currency,
    round_rate,
    simulate_year,
    suggest_tax_code,
)

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("UKPAYROLL_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def calculate(data: CalculationInput) -> CalculationResult:
    """Compute the monthly and annual payroll breakdown for ``data``.

    Raises :class:`~ukpayroll.backend.config.schema.UnknownTaxYear` when the
    tax year is not configured.
    """

    timings: dict[str, float] | None = {} if _profiling_enabled() else None

    config: YearConfiguration = load_year_configuration(data.tax_year)

    with _profile_section("allowance", timings):
        context = build_payroll_context(data, config)

    with _profile_section("simulation", timings):
        final_totals, months = simulate_year(context)

    with _profile_section("aggregation", timings):
        result = aggregate_results(
            months,
            tax_year=data.tax_year,
            region=data.region,
            personal_allowance=context.personal_allowance,
            taxable_income=final_totals.taxable_income,
            adjusted_net_income=context.adjusted_net_income,
            suggested_tax_code=suggest_tax_code(
                context.personal_allowance,
                context.adjusted_net_income,
                config.personal_allowance_default,
                config.pa_taper_threshold,
            ),
        )

    if timings is not None:
        _LOGGER.debug(
            "calculate timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return result


def _normalise_payload(request: CalculationRequest) -> CalculationInput:
    region = request.region or region_from_tax_code(request.tax_code) or Region.ENGLAND

    return CalculationInput(
        tax_year=request.tax_year,
        salary=request.salary,
        bonus=request.bonus,
        bonus_month=request.bonus_month,
        has_pay_rise=request.has_pay_rise,
        new_salary=request.new_salary,
        pay_rise_month=request.pay_rise_month,
        pension_contribution=request.pension_contribution,
        is_bonus_pensionable=request.is_bonus_pensionable,
        pensionable_bonus_percentage=request.pensionable_bonus_percentage,
        taxable_benefits=request.taxable_benefits,
        tax_code=request.tax_code,
        region=region,
        blind=request.blind,
    )


def _serialise_sections(result: CalculationResult) -> dict[str, Any]:
    summary = {
        "gross_income": round_currency(result.gross),
        "income_tax": round_currency(result.tax),
        "national_insurance": round_currency(result.nic),
        "pension": round_currency(result.pension),
        "take_home": round_currency(result.take_home),
        "effective_tax_rate": round_rate(result.effective_tax_rate),
        "personal_allowance": round_currency(result.personal_allowance),
        "taxable_income": round_currency(result.taxable_income),
        "adjusted_net_income": round_currency(result.adjusted_net_income),
        "monthly_take_home": round_currency(result.monthly_take_home),
        "suggested_tax_code": result.suggested_tax_code,
    }

    monthly = [
        {
            "month": entry.month,
            "gross": round_currency(entry.gross),
            "pension": round_currency(entry.pension),
            "tax": round_currency(entry.tax),
            "nic": round_currency(entry.nic),
            "take_home": round_currency(entry.take_home),
        }
        for entry in result.months
    ]

    breakdown = [
        {"key": entry.key, "label": entry.label, "value": round_currency(entry.value)}
        for entry in result.breakdown
    ]

    return {"summary": summary, "monthly": monthly, "breakdown": breakdown}


def serialise_result(
    result: CalculationResult,
    tax_code: str,
    *,
    adjusted: CalculationResult | None = None,
    adjusted_pension_contribution: float | None = None,
) -> dict[str, Any]:
    """Return the JSON-ready representation of ``result``.

    ``adjusted`` is the same profile recalculated at
    ``adjusted_pension_contribution`` and is included when given.
    """

    payload: dict[str, Any] = {
        **_serialise_sections(result),
        "meta": {
            "tax_year": result.tax_year,
            "region": result.region,
            "tax_code": tax_code,
        },
    }
    if adjusted is not None:
        payload["adjusted"] = {
            "pension_contribution": adjusted_pension_contribution,
            **_serialise_sections(adjusted),
        }

    response_model = CalculationResponse.model_validate(payload)
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_with_pension_contribution(
    data: CalculationInput, pension_contribution: float
) -> CalculationResult:
    """Recalculate ``data`` with a different pension contribution percentage."""

    return calculate(data.model_copy(update={"pension_contribution": pension_contribution}))


def calculate_payroll(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Validate ``payload``, run the engine and return the serialised result."""

    if isinstance(payload, CalculationRequest):
        request_model = payload
    else:
        if not isinstance(payload, Mapping):
            raise ValueError("Payload must be a mapping")
        if "tax_year" not in payload:
            raise ValueError("Payload must include a tax year")
        try:
            request_model = CalculationRequest.model_validate(payload)
        except ValidationError as exc:
            raise ValueError(format_validation_error(exc)) from exc

    normalised = _normalise_payload(request_model)
    result = calculate(normalised)

    adjusted_contribution = request_model.adjusted_pension_contribution
    adjusted = None
    if adjusted_contribution is not None:
        adjusted = calculate_with_pension_contribution(normalised, adjusted_contribution)

    return serialise_result(
        result,
        normalised.tax_code,
        adjusted=adjusted,
        adjusted_pension_contribution=adjusted_contribution,
    )


__all__ = [
    "calculate",
    "calculate_payroll",
    "calculate_with_pension_contribution",
    "serialise_result",
]
