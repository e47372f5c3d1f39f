"""Utilities for validating year configuration data and surfacing issues.

Band ordering, the open final band and NIC threshold order are enforced when
the schema loads. The checks here cover values the schema accepts but which
are unlikely to be intended.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from .year_config import (
    BandScheduleKey,
    ConfigurationError,
    NationalInsuranceConfig,
    TaxBand,
    UnknownTaxYear,
    YearConfiguration,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rate(scope: str, label: str, value: float) -> list[str]:
    if value < 0 or value > 1:
        return [_format_scope(scope, f"{label} rate {value} must be between 0 and 1")]
    return []


def _validate_bands(scope: str, bands: Sequence[TaxBand]) -> list[str]:
    errors: list[str] = []

    for position, band in enumerate(bands):
        errors.extend(_validate_rate(scope, f"band {position + 1}", band.rate))

    rates = [band.rate for band in bands]
    if rates != sorted(rates):
        errors.append(_format_scope(scope, "marginal rates should not decrease"))

    return errors


def _validate_national_insurance(nic: NationalInsuranceConfig) -> list[str]:
    scope = "national_insurance"
    errors: list[str] = []

    errors.extend(_validate_rate(scope, "main", nic.rate1))
    errors.extend(_validate_rate(scope, "upper", nic.rate2))

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    for key in BandScheduleKey:
        bands = config.bands_for(key)
        errors.extend(_validate_bands(f"band_schedules.{key.value}", bands))

    errors.extend(_validate_national_insurance(config.national_insurance))

    if config.pa_taper_threshold <= config.personal_allowance_default:
        errors.append(
            _format_scope(
                "pa_taper_threshold",
                "taper threshold must exceed the default personal allowance",
            )
        )

    return errors


def validate_all_years(years: Sequence[str] | None = None) -> dict[str, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[str, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[year] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        help="Specific tax years to validate, e.g. 2024/25 (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (UnknownTaxYear, FileNotFoundError, ConfigurationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
