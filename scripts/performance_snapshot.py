#!/usr/bin/env python3
"""Collect baseline timings for the payroll calculation service."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ukpayroll.backend.app.services.calculation_service import calculate_payroll  # noqa: E402

SAMPLE_PAYLOAD = {
    "tax_year": "2024/25",
    "salary": 62_000,
    "bonus": 8_000,
    "bonus_month": "December",
    "has_pay_rise": True,
    "new_salary": 68_000,
    "pay_rise_month": "September",
    "pension_contribution": 5,
    "is_bonus_pensionable": True,
    "pensionable_bonus_percentage": 50,
    "taxable_benefits": 1_200,
    "tax_code": "1257L",
    "region": "Scotland",
}


def measure_backend(iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated backend calculations."""

    calculate_payroll(SAMPLE_PAYLOAD)  # Warm configuration cache
    start = perf_counter()
    for _ in range(iterations):
        calculate_payroll(SAMPLE_PAYLOAD)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("UKPAYROLL_PROFILE_ITERATIONS", "500"))
    report = {"backend": measure_backend(iterations)}
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
