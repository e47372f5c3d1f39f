"""Lenient PAYE tax code interpretation.

Only the personal allowance is derived from the code. ``K`` codes and the
flat-rate codes (``BR``, ``D0``, ``D1``) simply remove the allowance; income is
still taxed through the normal progressive bands.
"""

from __future__ import annotations

import logging
import re

from ukpayroll.backend.app.models import Region

_LOGGER = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"^(\d+)")
_ZERO_ALLOWANCE_CODES = frozenset({"BR", "D0", "D1"})
_RESIDENCY_PREFIXES = {"S": Region.SCOTLAND, "C": Region.WALES}


def _strip_residency_prefix(code: str) -> str:
    if len(code) > 1 and code[0] in _RESIDENCY_PREFIXES:
        return code[1:]
    return code


def normalise_tax_code(code: str | None) -> str:
    return (code or "").strip().upper()


def parse_tax_code(code: str | None, default_allowance: float) -> float:
    """Return the base personal allowance encoded by ``code``.

    Unrecognised codes fall back to ``default_allowance`` instead of failing.
    """

    normalised = _strip_residency_prefix(normalise_tax_code(code))

    match = _LEADING_DIGITS.match(normalised)
    if match:
        return float(int(match.group(1)) * 10)

    if normalised.startswith("K"):
        return 0.0

    if normalised in _ZERO_ALLOWANCE_CODES:
        return 0.0

    _LOGGER.debug(
        "Unrecognised tax code %r; using default allowance %s", code, default_allowance
    )
    return default_allowance


def region_from_tax_code(code: str | None) -> Region | None:
    """Infer the taxpayer's region from an ``S`` or ``C`` code prefix."""

    normalised = normalise_tax_code(code)
    if len(normalised) > 1 and normalised[0] in _RESIDENCY_PREFIXES:
        return _RESIDENCY_PREFIXES[normalised[0]]
    return None


def suggest_tax_code(
    personal_allowance: float,
    adjusted_net_income: float,
    default_allowance: float,
    taper_threshold: float,
) -> str:
    """Tax code matching the allowance actually granted for the year.

    Incomes at or below the taper threshold keep the standard code. Above it
    the code is the tapered allowance in tens, or ``0T`` once nothing is left.
    """

    if adjusted_net_income <= taper_threshold:
        return f"{int(default_allowance // 10)}L"
    if personal_allowance <= 0:
        return "0T"
    return f"{int(personal_allowance // 10)}L"
