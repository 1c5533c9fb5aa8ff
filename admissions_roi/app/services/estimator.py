"""
Estimation model for the admissions call-center ROI calculator.

Four independent sub-models share the global assumptions (inbound calls,
admissions, net patient revenue):

- Missed Calls (Ella): admissions recovered from unanswered calls
- Outbound Lost Opportunity (Juliana): follow-up on qualified callers who did not admit
- Alumni Re-Admission (Sophy): outreach to the alumni database
- Assessments (Connie): staff time saved on assessments (a savings figure)

The annual figures are summed into a total impact and ranked for charting.
Pure computation - no I/O, no state between calls.
"""

import logging
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from admissions_roi.app.models.assumptions import Assumptions


logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
MINUTES_PER_HOUR = 60

# Outreach attempts per lost opportunity / per alumnus
JULIANA_CALLS_PER_LOST_OPPORTUNITY = 4
SOPHY_CALLS_PER_ALUMNUS = 4

SUB_MODEL_NAMES = {
    "ella": "Missed Calls (Ella)",
    "juliana": "Outbound Opp (Juliana)",
    "sophy": "Alumni (Sophy)",
    "connie": "Assessments (Connie)",
}


class ImpactBar(BaseModel):
    """One sub-model's annual figure in the impact ranking."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Sub-model key: ella|juliana|sophy|connie")
    name: str = Field(..., description="Display name, e.g. 'Missed Calls (Ella)'")
    value: float = Field(..., description="Annual revenue or savings in USD")


class DerivedResult(BaseModel):
    """
    Every intermediate and final quantity of the estimation model.

    Monetary values are USD, counts are per month unless named annual.
    Wire names are camelCase (ellaAnnualRevenue, julianaAddAdmissions, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    conversion_rate: float = Field(..., description="Admissions / inbound calls (0 when no calls)")

    # Missed Calls (Ella)
    missed_calls: float = Field(..., description="Missed or abandoned calls per month")
    ella_calls_handled: float = Field(..., description="Missed calls picked up by Ella")
    ella_add_admissions: float = Field(..., description="Recoverable admissions per month")
    ella_monthly_revenue: float = Field(..., description="Recovered revenue per month")
    ella_annual_revenue: float = Field(..., description="Recovered revenue per year")

    # Outbound Lost Opportunity (Juliana)
    total_calls: float = Field(..., description="Inbound calls per month (global)")
    qualified_opportunities: float = Field(..., description="Qualified opportunities per month")
    admissions: float = Field(..., description="Admissions per month (global)")
    lost_opportunities: float = Field(..., description="Qualified opportunities that did not admit, never negative")
    juliana_calls_handled: float = Field(..., description="Outbound calls placed by Juliana")
    juliana_add_admissions: float = Field(..., description="Additional admissions per month")
    juliana_monthly_revenue: float = Field(..., description="Additional revenue per month")
    juliana_annual_revenue: float = Field(..., description="Additional revenue per year")

    # Alumni Re-Admission (Sophy)
    alumni_database_size: float = Field(..., description="Total alumni (input echo)")
    sophy_outbound_calls: float = Field(..., description="Outbound calls placed by Sophy")
    alumni_contacts_per_month: float = Field(..., description="Contacts per month (display only)")
    sophy_add_admissions: float = Field(..., description="Re-admissions per month")
    sophy_monthly_revenue: float = Field(..., description="Re-admission revenue per month")
    sophy_annual_revenue: float = Field(..., description="Re-admission revenue per year")

    # Assessments (Connie)
    hours_per_assessment: float = Field(..., description="Staff hours per assessment")
    connie_assessments_handled: float = Field(..., description="Assessments handled by Connie per year")
    fte_hours_saved: float = Field(..., description="Staff hours saved per year")
    hourly_rate: float = Field(..., description="FTE hourly cost (input echo)")
    connie_annual_savings: float = Field(..., description="Staff cost saved per year")

    # Aggregate
    total_annual_impact: float = Field(..., description="Sum of the four annual figures")
    impact_ranking: List[ImpactBar] = Field(..., description="Sub-model annual figures, largest first")

    assumptions: Assumptions = Field(..., description="Echo of input assumptions for transparency")


def conversion_rate(assumptions: Assumptions) -> float:
    """Admissions per inbound call, 0 when there are no inbound calls."""
    if assumptions.monthly_inbound_calls > 0:
        return assumptions.monthly_admissions / assumptions.monthly_inbound_calls
    return 0.0


def rank_impacts(
    ella: float, juliana: float, sophy: float, connie: float
) -> List[ImpactBar]:
    """Order the four annual figures largest first."""
    bars = [
        ImpactBar(key="ella", name=SUB_MODEL_NAMES["ella"], value=ella),
        ImpactBar(key="juliana", name=SUB_MODEL_NAMES["juliana"], value=juliana),
        ImpactBar(key="sophy", name=SUB_MODEL_NAMES["sophy"], value=sophy),
        ImpactBar(key="connie", name=SUB_MODEL_NAMES["connie"], value=connie),
    ]
    return sorted(bars, key=lambda bar: bar.value, reverse=True)


def compute(assumptions: Assumptions) -> DerivedResult:
    """
    Run every sub-model against one Assumptions snapshot.

    Total and deterministic: any finite inputs (zero and negatives included)
    produce a result, and the same input always yields the same output.

    Calculation steps:
    1. House-wide conversion rate (guarded against zero calls)
    2. Ella - missed calls recovered at the conversion rate
    3. Juliana - lost opportunities (clamped at 0) followed up by outbound calls
    4. Sophy - alumni re-admissions
    5. Connie - staff hours saved on assessments
    6. Total annual impact and ranking

    Args:
        assumptions: Current Assumptions record

    Returns:
        DerivedResult with all computed metrics
    """
    a = assumptions

    # Step 1: Conversion rate
    rate = conversion_rate(a)

    # Step 2: Missed Calls (Ella)
    missed_calls = a.monthly_inbound_calls * a.missed_call_rate
    ella_calls_handled = missed_calls
    ella_add_admissions = ella_calls_handled * rate
    ella_monthly_revenue = ella_add_admissions * a.avg_net_patient_revenue
    ella_annual_revenue = ella_monthly_revenue * MONTHS_PER_YEAR

    # Step 3: Outbound Lost Opportunity (Juliana)
    # No lost pool when admissions already cover the qualified volume
    total_calls = a.monthly_inbound_calls
    qualified_opportunities = total_calls * a.qualified_opportunities_percent
    admissions = a.monthly_admissions
    lost_opportunities = max(0.0, qualified_opportunities - admissions)
    juliana_calls_handled = lost_opportunities * JULIANA_CALLS_PER_LOST_OPPORTUNITY
    juliana_add_admissions = lost_opportunities * a.lost_opportunity_conversion_rate
    juliana_monthly_revenue = juliana_add_admissions * a.avg_net_patient_revenue
    juliana_annual_revenue = juliana_monthly_revenue * MONTHS_PER_YEAR

    # Step 4: Alumni Re-Admission (Sophy)
    # alumni_contacts_per_month is echoed for display and feeds no formula
    sophy_outbound_calls = a.alumni_database_size * SOPHY_CALLS_PER_ALUMNUS
    sophy_add_admissions = a.alumni_database_size * a.alumni_conversion_rate
    sophy_monthly_revenue = sophy_add_admissions * a.avg_net_patient_revenue
    sophy_annual_revenue = sophy_monthly_revenue * MONTHS_PER_YEAR

    # Step 5: Assessments (Connie)
    hours_per_assessment = a.minutes_per_assessment / MINUTES_PER_HOUR
    connie_assessments_handled = a.annual_assessments * a.assessments_handled_rate
    fte_hours_saved = connie_assessments_handled * hours_per_assessment
    connie_annual_savings = fte_hours_saved * a.hourly_rate

    # Step 6: Aggregate (savings and revenue are summed as the same dollars)
    total_annual_impact = (
        ella_annual_revenue
        + juliana_annual_revenue
        + sophy_annual_revenue
        + connie_annual_savings
    )
    ranking = rank_impacts(
        ella_annual_revenue,
        juliana_annual_revenue,
        sophy_annual_revenue,
        connie_annual_savings,
    )

    logger.debug("Computed total annual impact %.2f", total_annual_impact)

    return DerivedResult(
        conversion_rate=rate,
        missed_calls=missed_calls,
        ella_calls_handled=ella_calls_handled,
        ella_add_admissions=ella_add_admissions,
        ella_monthly_revenue=ella_monthly_revenue,
        ella_annual_revenue=ella_annual_revenue,
        total_calls=total_calls,
        qualified_opportunities=qualified_opportunities,
        admissions=admissions,
        lost_opportunities=lost_opportunities,
        juliana_calls_handled=juliana_calls_handled,
        juliana_add_admissions=juliana_add_admissions,
        juliana_monthly_revenue=juliana_monthly_revenue,
        juliana_annual_revenue=juliana_annual_revenue,
        alumni_database_size=a.alumni_database_size,
        sophy_outbound_calls=sophy_outbound_calls,
        alumni_contacts_per_month=a.alumni_contacts_per_month,
        sophy_add_admissions=sophy_add_admissions,
        sophy_monthly_revenue=sophy_monthly_revenue,
        sophy_annual_revenue=sophy_annual_revenue,
        hours_per_assessment=hours_per_assessment,
        connie_assessments_handled=connie_assessments_handled,
        fte_hours_saved=fte_hours_saved,
        hourly_rate=a.hourly_rate,
        connie_annual_savings=connie_annual_savings,
        total_annual_impact=total_annual_impact,
        impact_ranking=ranking,
        assumptions=a,
    )
