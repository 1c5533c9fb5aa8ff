"""
Tests for the estimation model.

Covers the four sub-models against the baseline assumptions, the
conversion-rate and lost-opportunity guards, and the aggregate/ranking.
"""

import pytest

from admissions_roi.app.models.assumptions import Assumptions
from admissions_roi.app.services.estimator import compute, conversion_rate, rank_impacts


# ============================================================================
# Baseline Scenario
# ============================================================================

def test_missed_calls_defaults(defaults):
    """Ella: 330 missed calls recovered at the 3.03% house conversion rate."""
    result = compute(defaults)

    # Conversion: 100 / 3300
    assert result.conversion_rate == pytest.approx(0.030303, rel=1e-4)

    # Missed: 3300 * 0.10 = 330
    assert result.missed_calls == pytest.approx(330.0)
    assert result.ella_calls_handled == result.missed_calls

    # Admissions: 330 * 100 / 3300 = 10
    assert result.ella_add_admissions == pytest.approx(10.0)

    # Monthly: 10 * 13,000 = 130,000; annual * 12 = 1,560,000
    assert result.ella_monthly_revenue == pytest.approx(130_000.0)
    assert result.ella_annual_revenue == pytest.approx(1_560_000.0)


def test_outbound_lost_opportunity_defaults(defaults):
    """Juliana: 825 qualified, 725 lost, 4 outbound calls each."""
    result = compute(defaults)

    assert result.total_calls == 3300.0
    assert result.qualified_opportunities == pytest.approx(825.0)
    assert result.admissions == 100.0
    assert result.lost_opportunities == pytest.approx(725.0)
    assert result.juliana_calls_handled == pytest.approx(2900.0)

    # 725 * 0.6% = 4.35 admits -> 56,550 / month -> 678,600 / year
    assert result.juliana_add_admissions == pytest.approx(4.35)
    assert result.juliana_monthly_revenue == pytest.approx(56_550.0)
    assert result.juliana_annual_revenue == pytest.approx(678_600.0)


def test_alumni_readmission_defaults(defaults):
    """Sophy: 0.5% of 1,000 alumni re-admitted."""
    result = compute(defaults)

    assert result.sophy_outbound_calls == pytest.approx(4000.0)
    assert result.sophy_add_admissions == pytest.approx(5.0)
    assert result.sophy_monthly_revenue == pytest.approx(65_000.0)
    assert result.sophy_annual_revenue == pytest.approx(780_000.0)
    assert result.alumni_contacts_per_month == 200.0


def test_assessments_defaults(defaults):
    """Connie: 3,000 assessments at 20 minutes, $30/hour."""
    result = compute(defaults)

    assert result.hours_per_assessment == pytest.approx(1 / 3)
    assert result.connie_assessments_handled == pytest.approx(3000.0)
    assert result.fte_hours_saved == pytest.approx(1000.0)
    assert result.connie_annual_savings == pytest.approx(30_000.0)


def test_total_and_ranking_defaults(defaults):
    result = compute(defaults)

    # 1,560,000 + 678,600 + 780,000 + 30,000
    assert result.total_annual_impact == pytest.approx(3_048_600.0)
    assert [bar.key for bar in result.impact_ranking] == ["ella", "sophy", "juliana", "connie"]
    assert result.impact_ranking[0].name == "Missed Calls (Ella)"


# ============================================================================
# Edge Cases
# ============================================================================

@pytest.mark.parametrize("calls", [0.0, -1.0, -3300.0])
def test_conversion_rate_guards_non_positive_calls(calls):
    """No division by zero: conversion rate is 0 without inbound calls."""
    assumptions = Assumptions(monthly_inbound_calls=calls)

    assert conversion_rate(assumptions) == 0.0
    result = compute(assumptions)
    assert result.conversion_rate == 0.0
    assert result.ella_add_admissions == 0.0
    assert result.ella_annual_revenue == 0.0


@pytest.mark.parametrize("admissions", [825.0, 1000.0, 5000.0])
def test_lost_opportunities_clamped_when_admissions_cover_qualified(admissions):
    """Admissions at or above qualified volume leave no lost pool."""
    result = compute(Assumptions(monthly_admissions=admissions))

    assert result.lost_opportunities == 0.0
    assert result.juliana_calls_handled == 0.0
    assert result.juliana_add_admissions == 0.0
    assert result.juliana_monthly_revenue == 0.0
    assert result.juliana_annual_revenue == 0.0


@pytest.mark.parametrize("admissions", [0.0, 100.0, 824.0])
def test_lost_opportunities_is_qualified_minus_admissions(admissions):
    result = compute(Assumptions(monthly_admissions=admissions))

    expected = max(0.0, result.qualified_opportunities - admissions)
    assert result.lost_opportunities == expected


def test_alumni_contacts_per_month_is_display_only(defaults):
    """Changing contacts per month never moves a Sophy figure."""
    before = compute(defaults)
    after = compute(defaults.replace(alumni_contacts_per_month=50_000))

    assert after.alumni_contacts_per_month == 50_000
    assert after.sophy_outbound_calls == before.sophy_outbound_calls
    assert after.sophy_add_admissions == before.sophy_add_admissions
    assert after.sophy_monthly_revenue == before.sophy_monthly_revenue
    assert after.sophy_annual_revenue == before.sophy_annual_revenue
    assert after.total_annual_impact == before.total_annual_impact


def test_negative_inputs_do_not_raise():
    result = compute(Assumptions(
        monthly_inbound_calls=1000,
        monthly_admissions=-50,
        avg_net_patient_revenue=-1000,
        minutes_per_assessment=-30,
    ))

    assert result.lost_opportunities == pytest.approx(300.0)
    # -5 admits at -$1,000 each
    assert result.conversion_rate == pytest.approx(-0.05)
    assert result.ella_annual_revenue == pytest.approx(60_000.0)
    assert result.connie_annual_savings < 0


def test_all_zero_assumptions():
    zero = Assumptions(**{name: 0 for name in Assumptions.model_fields})
    result = compute(zero)

    assert result.total_annual_impact == 0.0
    assert all(bar.value == 0.0 for bar in result.impact_ranking)


# ============================================================================
# Aggregation
# ============================================================================

@pytest.mark.parametrize("overrides", [
    {},
    {"monthly_inbound_calls": 12_345.6, "missed_call_rate": 0.37},
    {"alumni_database_size": 7_777, "alumni_conversion_rate": 0.0123},
    {"monthly_admissions": 9_000, "hourly_rate": 61.25},
])
def test_total_is_exact_sum_of_annual_figures(defaults, overrides):
    result = compute(defaults.replace(**overrides))

    assert result.total_annual_impact == (
        result.ella_annual_revenue
        + result.juliana_annual_revenue
        + result.sophy_annual_revenue
        + result.connie_annual_savings
    )


def test_ranking_is_descending():
    ranking = rank_impacts(ella=10.0, juliana=400.0, sophy=-5.0, connie=75.0)

    assert [bar.key for bar in ranking] == ["juliana", "connie", "ella", "sophy"]
    values = [bar.value for bar in ranking]
    assert values == sorted(values, reverse=True)


def test_connie_can_outrank_revenue_models(defaults):
    """Savings compete in the same ranking as revenue."""
    result = compute(defaults.replace(annual_assessments=10_000_000))

    assert result.impact_ranking[0].key == "connie"


# ============================================================================
# Determinism
# ============================================================================

def test_compute_is_deterministic(defaults):
    first = compute(defaults)
    second = compute(defaults)

    assert first == second
    assert first.model_dump() == second.model_dump()


def test_assumptions_echoed(defaults):
    result = compute(defaults)

    assert result.assumptions == defaults
