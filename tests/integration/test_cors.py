"""Integration tests covering CORS behaviour for API endpoints."""

import pytest
from flask.testing import FlaskClient

from ukpayroll.backend.app import create_app

PAYROLL_UI_ORIGIN = "https://payroll-ui.test"
DISALLOWED_ORIGIN = "https://blocked.test"


@pytest.fixture()
def cors_client(monkeypatch: pytest.MonkeyPatch) -> FlaskClient:
    """Return a client whose allow-list only contains the payroll UI."""

    monkeypatch.setenv("UKPAYROLL_ALLOWED_ORIGINS", f" {PAYROLL_UI_ORIGIN} ,")

    app = create_app()
    app.config.update(TESTING=True)

    with app.test_client() as client:
        yield client


def test_calculation_preflight_allows_configured_origin(cors_client: FlaskClient) -> None:
    response = cors_client.options(
        "/api/v1/calculations",
        headers={
            "Origin": PAYROLL_UI_ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == PAYROLL_UI_ORIGIN
    assert "POST" in response.headers.get("Access-Control-Allow-Methods", "")


def test_calculation_response_carries_cors_header(cors_client: FlaskClient) -> None:
    response = cors_client.post(
        "/api/v1/calculations",
        json={"tax_year": "2024/25", "salary": 25_000},
        headers={"Origin": PAYROLL_UI_ORIGIN},
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") == PAYROLL_UI_ORIGIN


def test_disallowed_origin_does_not_receive_cors_headers(
    cors_client: FlaskClient,
) -> None:
    response = cors_client.get(
        "/api/v1/config/years",
        headers={"Origin": DISALLOWED_ORIGIN},
    )

    assert response.status_code == 200
    assert response.headers.get("Access-Control-Allow-Origin") is None


def test_missing_allow_list_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("UKPAYROLL_ALLOWED_ORIGINS", raising=False)

    with pytest.warns(UserWarning, match="No allowed origins"):
        create_app()
