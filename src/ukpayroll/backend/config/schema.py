"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class UnknownTaxYear(LookupError):
    """Raised when a tax year is not declared in the configuration manifest."""

    def __init__(self, tax_year: str) -> None:
        super().__init__(f"Unknown tax year: {tax_year}")
        self.tax_year = tax_year


class BandScheduleKey(str, Enum):
    """Identifiers for the two income tax band schedule variants."""

    ENGLAND_WALES_NI = "england_wales_ni"
    SCOTLAND = "scotland"


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBand(ImmutableModel):
    """A marginal rate applying up to a cumulative taxable-income ceiling.

    ``ceiling`` is ``None`` for the final band, which has no upper limit.
    """

    name: str | None = None
    rate: float
    ceiling: float | None = None

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBand:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.ceiling is not None and self.ceiling <= 0:
            raise ConfigurationError("Band ceilings must be positive values")
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.ceiling is None


class NationalInsuranceConfig(ImmutableModel):
    """Annual employee (Class 1 primary) National Insurance parameters."""

    primary_threshold: float = Field(ge=0)
    upper_earnings_limit: float = Field(gt=0)
    rate1: float = Field(ge=0)
    rate2: float = Field(ge=0)

    @model_validator(mode="after")
    def _validate_thresholds(self) -> NationalInsuranceConfig:
        if self.upper_earnings_limit <= self.primary_threshold:
            raise ConfigurationError(
                "National Insurance upper earnings limit must exceed the primary threshold"
            )
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    tax_year: str
    meta: Mapping[str, Any] = Field(default_factory=dict)
    personal_allowance_default: float = Field(ge=0)
    pa_taper_threshold: float = Field(gt=0)
    blind_persons_allowance: float = Field(default=0.0, ge=0)
    band_schedules: Mapping[BandScheduleKey, tuple[TaxBand, ...]]
    national_insurance: NationalInsuranceConfig

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        schedules = prepared.get("band_schedules")
        if not isinstance(schedules, Mapping):
            raise ConfigurationError("Configuration must include a 'band_schedules' section")

        for key in BandScheduleKey:
            if not isinstance(schedules.get(key.value), Sequence):
                raise ConfigurationError(
                    f"Band schedules require a '{key.value}' band list"
                )

        return prepared

    @field_validator("band_schedules")
    @classmethod
    def _validate_schedules(
        cls, value: Mapping[BandScheduleKey, tuple[TaxBand, ...]]
    ) -> Mapping[BandScheduleKey, tuple[TaxBand, ...]]:
        for key, bands in value.items():
            cls._validate_band_sequence(key, bands)
        return value

    @staticmethod
    def _validate_band_sequence(key: BandScheduleKey, bands: Sequence[TaxBand]) -> None:
        if not bands:
            raise ConfigurationError(f"Schedule '{key.value}' must define at least one band")

        last_ceiling = 0.0
        for band in bands[:-1]:
            if band.ceiling is None:
                raise ConfigurationError(
                    f"Schedule '{key.value}' may only leave the final band unbounded"
                )
            if band.ceiling <= last_ceiling:
                raise ConfigurationError(
                    f"Schedule '{key.value}' band ceilings must be in ascending order"
                )
            last_ceiling = band.ceiling

        if bands[-1].ceiling is not None:
            raise ConfigurationError(
                f"Final band of schedule '{key.value}' must have an open ceiling"
            )

    def bands_for(self, key: BandScheduleKey) -> tuple[TaxBand, ...]:
        """Return the ordered bands of the requested schedule variant."""

        return self.band_schedules[key]


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: str
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year.replace('/', '-')}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[str] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: str) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[str, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BandScheduleKey",
    "ConfigurationError",
    "ImmutableModel",
    "NationalInsuranceConfig",
    "TaxBand",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "UnknownTaxYear",
    "ValidationError",
    "YearConfiguration",
]
