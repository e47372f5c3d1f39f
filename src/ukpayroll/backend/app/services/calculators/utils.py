"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Sequence

from ukpayroll.backend.config.year_config import TaxBand


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = value * 100
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def calculate_progressive_tax(amount: float, bands: Sequence[TaxBand]) -> float:
    """Calculate progressive tax for ``amount`` using ordered ``bands``.

    Each band taxes the slice of income between the previous band's ceiling and
    its own; the open final band taxes whatever remains.
    """

    if amount <= 0:
        return 0.0

    total = 0.0
    remaining = amount
    previous_ceiling = 0.0

    for band in bands:
        if remaining <= 0:
            break

        if band.ceiling is None:
            taxable = remaining
        else:
            taxable = min(remaining, band.ceiling - previous_ceiling)
            previous_ceiling = band.ceiling

        total += taxable * band.rate
        remaining -= taxable

    return total


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
