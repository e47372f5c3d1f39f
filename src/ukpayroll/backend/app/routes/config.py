"""Expose tax year configuration consumed by the front-end forms.

Tax years appear in URLs with a dash (``2024-25``) and are mapped back to the
``2024/25`` keys used by the configuration manifest.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from ukpayroll.backend.app.http import problem_response
from ukpayroll.backend.app.models import Month, Region
from ukpayroll.backend.app.services.calculators import format_percentage
from ukpayroll.backend.config.year_config import (
    TaxBand,
    UnknownTaxYear,
    YearConfiguration,
    load_manifest,
    load_year_configuration,
)
from ukpayroll.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def _year_from_slug(slug: str) -> str:
    return slug.replace("-", "/")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_band(band: TaxBand) -> dict[str, Any]:
    return {
        "name": band.name,
        "rate": band.rate,
        "rate_label": format_percentage(band.rate),
        "ceiling": band.ceiling,
    }


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    nic = config.national_insurance
    return {
        "tax_year": config.tax_year,
        "label": config.meta.get("label"),
        "personal_allowance_default": config.personal_allowance_default,
        "pa_taper_threshold": config.pa_taper_threshold,
        "blind_persons_allowance": config.blind_persons_allowance,
        "band_schedules": {
            key.value: [_serialise_band(band) for band in bands]
            for key, bands in config.band_schedules.items()
        },
        "regions": {region.value: region.schedule_key.value for region in Region},
        "national_insurance": {
            "primary_threshold": nic.primary_threshold,
            "upper_earnings_limit": nic.upper_earnings_limit,
            "rate1": nic.rate1,
            "rate2": nic.rate2,
        },
        "months": [month.value for month in Month],
    }


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return supported tax years and the default selection."""

    metadata = get_configuration_metadata()
    manifest = load_manifest()
    metadata["years"] = [
        {"tax_year": entry.year, "status": entry.status, "notes_url": entry.notes_url}
        for entry in manifest.years
    ]
    return jsonify(metadata), 200


@blueprint.get("/<year_slug>")
def get_year(year_slug: str) -> tuple[Any, int]:
    """Return the band schedules and thresholds for a single tax year."""

    try:
        config = load_year_configuration(_year_from_slug(year_slug))
    except UnknownTaxYear as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    return jsonify(_serialise_year(config)), 200
