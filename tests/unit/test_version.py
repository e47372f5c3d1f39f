"""Unit coverage for the project version helper."""

from __future__ import annotations

import tomllib
from importlib import metadata

import pytest

from ukpayroll.backend import version
from ukpayroll.backend.version import get_project_version


@pytest.fixture(autouse=True)
def _clear_version_cache():
    get_project_version.cache_clear()  # type: ignore[attr-defined]
    yield
    get_project_version.cache_clear()  # type: ignore[attr-defined]


def _pyproject_version() -> str:
    with version.PYPROJECT_PATH.open("rb") as handle:
        return tomllib.load(handle)["project"]["version"]


def test_get_project_version_prefers_package_metadata(monkeypatch) -> None:
    monkeypatch.setattr(metadata, "version", lambda package: "9.9.9")

    assert get_project_version() == "9.9.9"


def test_get_project_version_falls_back_to_pyproject(monkeypatch) -> None:
    def raise_package_not_found(_: str) -> str:
        raise metadata.PackageNotFoundError

    monkeypatch.setattr(metadata, "version", raise_package_not_found)

    assert get_project_version() == _pyproject_version()
