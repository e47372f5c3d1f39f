"""Unit tests for the cumulative monthly payroll fold."""

from __future__ import annotations

import pytest

from ukpayroll.backend.app.models import Month, Region
from ukpayroll.backend.app.services.calculators import (
    PayrollAccumulator,
    advance_month,
    aggregate_results,
    build_payroll_context,
    simulate_year,
)
from ukpayroll.backend.config.year_config import load_year_configuration


def _context(data):
    return build_payroll_context(data, load_year_configuration(data.tax_year))


def test_context_resolves_allowance_and_schedule(make_input) -> None:
    context = _context(make_input(region=Region.SCOTLAND))

    assert context.personal_allowance == pytest.approx(12_570)
    assert len(context.bands) == 6


def test_context_applies_taper(make_input) -> None:
    context = _context(make_input(salary=120_000))

    assert context.adjusted_net_income == pytest.approx(120_000)
    assert context.personal_allowance == pytest.approx(2_570)


def test_pension_reduces_adjusted_net_income_below_taper(make_input) -> None:
    context = _context(make_input(salary=110_000, pension_contribution=10))

    assert context.adjusted_net_income == pytest.approx(99_000)
    assert context.personal_allowance == pytest.approx(12_570)


def test_taxable_benefits_count_towards_taper(make_input) -> None:
    context = _context(make_input(salary=100_000, taxable_benefits=4_000))

    assert context.personal_allowance == pytest.approx(10_570)


def test_k_code_and_blind_allowance(make_input) -> None:
    assert _context(make_input(tax_code="K100")).personal_allowance == 0
    assert _context(make_input(blind=True)).personal_allowance == pytest.approx(15_730)


def test_first_month_uses_one_twelfth_of_allowance(make_input) -> None:
    context = _context(make_input())

    totals, result = advance_month(context, PayrollAccumulator(), Month.APRIL)

    assert result.gross == pytest.approx(50_000 / 12)
    assert totals.taxable_income == pytest.approx((50_000 - 12_570) / 12)
    assert result.tax == pytest.approx(0.2 * (50_000 - 12_570) / 12)
    assert result.nic == 0
    assert totals.gross == pytest.approx(result.gross)


def test_monthly_tax_is_clamped_when_ytd_liability_falls(make_input) -> None:
    context = _context(make_input())
    overpaid = PayrollAccumulator(gross=0.0, tax=1_000_000.0, nic=1_000_000.0)

    totals, result = advance_month(context, overpaid, Month.APRIL)

    assert result.tax == 0
    assert result.nic == 0
    assert totals.tax == overpaid.tax
    assert result.take_home == pytest.approx(result.gross)


def test_flat_salary_year_matches_annual_figures(make_input) -> None:
    totals, months = simulate_year(_context(make_input()))

    assert [entry.month for entry in months] == list(Month)
    assert totals.gross == pytest.approx(50_000)
    assert totals.tax == pytest.approx(7_486.00)
    assert totals.nic == pytest.approx(2_994.40)
    assert totals.taxable_income == pytest.approx(37_430)

    # NIC only starts once year-to-date pay passes the annual primary threshold.
    assert [entry.nic == 0 for entry in months[:3]] == [True, True, True]
    assert months[3].nic > 0
    assert all(entry.tax == pytest.approx(7_486 / 12) for entry in months)


def test_tapered_salary_year(make_input) -> None:
    totals, _ = simulate_year(_context(make_input(salary=120_000)))

    assert totals.tax == pytest.approx(39_432.00)
    assert totals.nic == pytest.approx(4_410.60)


def test_bonus_is_paid_in_a_single_month(make_input) -> None:
    data = make_input(salary=36_000, bonus=6_000, bonus_month=Month.JANUARY)

    _, months = simulate_year(_context(data))

    grosses = {entry.month: entry.gross for entry in months}
    assert grosses[Month.JANUARY] == pytest.approx(9_000)
    assert grosses[Month.DECEMBER] == pytest.approx(3_000)
    assert months[Month.JANUARY.position].tax > months[Month.DECEMBER.position].tax


@pytest.mark.parametrize("rise_position", [1, 6, 11])
def test_pay_rise_back_pay_and_annual_gross(make_input, rise_position: int) -> None:
    salary, new_salary = 30_000.0, 42_000.0
    data = make_input(
        salary=salary,
        has_pay_rise=True,
        new_salary=new_salary,
        pay_rise_month=Month.from_position(rise_position),
    )

    totals, months = simulate_year(_context(data))

    back_pay = (new_salary - salary) / 12 * rise_position
    assert months[rise_position].gross == pytest.approx(new_salary / 12 + back_pay)
    assert months[rise_position - 1].gross == pytest.approx(salary / 12)
    assert totals.gross == pytest.approx(
        salary / 12 * rise_position + new_salary / 12 * (12 - rise_position) + back_pay
    )


@pytest.mark.parametrize("new_salary", [30_000.0, 0.0])
def test_pay_cut_keeps_original_salary(make_input, new_salary: float) -> None:
    data = make_input(
        salary=60_000,
        has_pay_rise=True,
        new_salary=new_salary,
        pay_rise_month=Month.OCTOBER,
        pension_contribution=5,
    )

    totals, months = simulate_year(_context(data))

    assert data.pay_rise_position is None
    for entry in months:
        assert entry.gross == pytest.approx(5_000)
        assert entry.pension == pytest.approx(250)
        assert entry.take_home > 0
    assert totals.gross == pytest.approx(60_000)


def test_pay_rise_back_pay_is_pensionable(make_input) -> None:
    data = make_input(
        salary=30_000,
        has_pay_rise=True,
        new_salary=36_000,
        pay_rise_month=Month.OCTOBER,
        pension_contribution=5,
    )

    totals, months = simulate_year(_context(data))

    assert months[Month.OCTOBER.position].pension == pytest.approx((3_000 + 3_000) * 0.05)
    assert totals.pension == pytest.approx(1_800)


SCENARIOS = [
    {},
    {"salary": 0.0},
    {"salary": 12_000.0},
    {"salary": 180_000.0, "region": Region.SCOTLAND, "tax_code": "S1257L"},
    {
        "salary": 62_000.0,
        "bonus": 8_000.0,
        "bonus_month": Month.DECEMBER,
        "has_pay_rise": True,
        "new_salary": 68_000.0,
        "pay_rise_month": Month.SEPTEMBER,
        "pension_contribution": 5.0,
        "is_bonus_pensionable": True,
        "pensionable_bonus_percentage": 50.0,
        "taxable_benefits": 1_200.0,
    },
    {"salary": 45_000.0, "tax_code": "BR", "tax_year": "2023/24"},
    {"salary": 95_000.0, "bonus": 30_000.0, "bonus_month": Month.MARCH, "tax_year": "2025/26"},
]


@pytest.mark.parametrize("overrides", SCENARIOS)
def test_running_totals_reconcile_with_aggregates(make_input, overrides) -> None:
    data = make_input(**overrides)
    context = _context(data)

    totals, months = simulate_year(context)
    result = aggregate_results(
        months,
        tax_year=data.tax_year,
        region=data.region,
        personal_allowance=context.personal_allowance,
        taxable_income=totals.taxable_income,
        adjusted_net_income=context.adjusted_net_income,
        suggested_tax_code="1257L",
    )

    assert result.gross == pytest.approx(totals.gross)
    assert result.tax == pytest.approx(totals.tax)
    assert result.nic == pytest.approx(totals.nic)
    assert result.pension == pytest.approx(totals.pension)

    for entry in months:
        assert entry.tax >= 0
        assert entry.nic >= 0
        assert entry.gross - entry.pension - entry.tax - entry.nic == pytest.approx(
            entry.take_home
        )
