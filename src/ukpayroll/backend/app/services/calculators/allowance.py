"""Personal allowance taper and additions."""

from __future__ import annotations

import logging

_LOGGER = logging.getLogger(__name__)


def calculate_personal_allowance(
    adjusted_net_income: float, base_allowance: float, taper_threshold: float
) -> float:
    """Apply the high-income taper to ``base_allowance``.

    Above ``taper_threshold`` the allowance falls by £1 for every £2 of
    adjusted net income, down to zero.
    """

    if adjusted_net_income <= taper_threshold:
        return base_allowance

    reduction = (adjusted_net_income - taper_threshold) / 2
    allowance = max(0.0, base_allowance - reduction)
    _LOGGER.debug(
        "Personal allowance tapered from %s to %s (adjusted net income %s)",
        base_allowance,
        allowance,
        adjusted_net_income,
    )
    return allowance


def apply_blind_persons_allowance(
    allowance: float, blind: bool, blind_persons_allowance: float
) -> float:
    if not blind:
        return allowance
    return allowance + blind_persons_allowance
