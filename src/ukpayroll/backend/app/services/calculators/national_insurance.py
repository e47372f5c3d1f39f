"""Employee Class 1 National Insurance on cumulative earnings."""

from __future__ import annotations

from ukpayroll.backend.config.year_config import NationalInsuranceConfig


def calculate_national_insurance(gross: float, config: NationalInsuranceConfig) -> float:
    """Return NIC due on ``gross`` using the annual thresholds in ``config``."""

    if gross <= config.primary_threshold:
        return 0.0

    main_band = min(gross, config.upper_earnings_limit) - config.primary_threshold
    nic = max(0.0, main_band) * config.rate1

    if gross > config.upper_earnings_limit:
        nic += (gross - config.upper_earnings_limit) * config.rate2

    return nic
