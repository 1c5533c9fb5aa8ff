"""
Input boundary between operator-entered text and the Assumptions record.

Percentage fields are edited as whole percents ("10") and stored as
fractions (0.10). This module owns that scaling in both directions, and the
coercion of unparsable text to 0, so the estimation formulas only ever see
fractions.
"""

import logging
import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from admissions_roi.app.models.assumptions import Assumptions, parse_number


logger = logging.getLogger(__name__)

SECTIONS = ("global", "ella", "juliana", "sophy", "connie")

_TRAILING_ZEROS = re.compile(r"\.?0+$")


class UnknownFieldError(KeyError):
    """Raised when an edit names a field that is not part of Assumptions."""

    def __init__(self, field: str):
        super().__init__(field)
        self.field = field


class FieldSpec(BaseModel):
    """Display metadata for one editable Assumptions field."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Wire name, e.g. 'missedCallRate'")
    attribute: str = Field(..., description="Assumptions attribute, e.g. 'missed_call_rate'")
    label: str = Field(..., description="Input label")
    sub_label: Optional[str] = Field(default=None, description="Hint shown under the label")
    section: str = Field(..., description="Owning card: global|ella|juliana|sophy|connie")
    is_percentage: bool = Field(default=False, description="Edited as whole percent, stored as fraction")
    step: Optional[str] = Field(default=None, description="Explicit input step")

    @property
    def input_step(self) -> str:
        if self.step is not None:
            return self.step
        return "0.1" if self.is_percentage else "1"


FIELD_CATALOG: List[FieldSpec] = [
    FieldSpec(key="monthlyInboundCalls", attribute="monthly_inbound_calls",
              label="Monthly Inbound Calls", section="global"),
    FieldSpec(key="monthlyAdmissions", attribute="monthly_admissions",
              label="Monthly Admissions", section="global"),
    FieldSpec(key="avgNetPatientRevenue", attribute="avg_net_patient_revenue",
              label="Avg. Net Patient Revenue", section="global"),
    FieldSpec(key="missedCallRate", attribute="missed_call_rate",
              label="Missed/Abandoned Rate", sub_label="Industry avg: 10-30%",
              section="ella", is_percentage=True, step="0.01"),
    FieldSpec(key="qualifiedOpportunitiesPercent", attribute="qualified_opportunities_percent",
              label="Qualified Opportunities %", section="juliana",
              is_percentage=True, step="0.01"),
    FieldSpec(key="lostOpportunityConversionRate", attribute="lost_opportunity_conversion_rate",
              label="Conversion Rate", sub_label="0.6% of lost opps",
              section="juliana", is_percentage=True, step="0.001"),
    FieldSpec(key="alumniDatabaseSize", attribute="alumni_database_size",
              label="Total Alumni", section="sophy"),
    FieldSpec(key="alumniContactsPerMonth", attribute="alumni_contacts_per_month",
              label="Contacts per Month", section="sophy"),
    FieldSpec(key="alumniConversionRate", attribute="alumni_conversion_rate",
              label="Conversion Rate", sub_label="5 admits per 1000 alumni = 0.5%",
              section="sophy", is_percentage=True, step="0.001"),
    FieldSpec(key="annualAssessments", attribute="annual_assessments",
              label="Annual Assessments", section="connie"),
    FieldSpec(key="minutesPerAssessment", attribute="minutes_per_assessment",
              label="Time per Assess (Min)", section="connie", step="1"),
    FieldSpec(key="assessmentsHandledRate", attribute="assessments_handled_rate",
              label="% Handled by Connie", section="connie", is_percentage=True),
    FieldSpec(key="hourlyRate", attribute="hourly_rate",
              label="FTE Hourly Cost ($)", section="connie"),
]

_FIELDS_BY_NAME: Dict[str, FieldSpec] = {}
for _spec in FIELD_CATALOG:
    _FIELDS_BY_NAME[_spec.key] = _spec
    _FIELDS_BY_NAME[_spec.attribute] = _spec


def get_field(name: str) -> FieldSpec:
    """
    Look up a field by wire name or attribute name.

    Raises:
        UnknownFieldError: If no Assumptions field has that name
    """
    spec = _FIELDS_BY_NAME.get(name)
    if spec is None:
        raise UnknownFieldError(name)
    return spec


def fields_for_section(section: str) -> List[FieldSpec]:
    return [spec for spec in FIELD_CATALOG if spec.section == section]


def to_display(value: float, is_percentage: bool) -> str:
    """
    Render a stored value as the text shown in its input.

    Percentages are scaled by 100 and printed with at most two decimals
    (0.1 -> "10", 0.006 -> "0.6"). Plain values print integers without a
    decimal part.
    """
    if is_percentage:
        return _TRAILING_ZEROS.sub("", f"{value * 100:.2f}")
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def from_display(text: object, is_percentage: bool) -> float:
    """Convert input text back to the stored value (0 when unparsable)."""
    number = parse_number(text)
    return number / 100 if is_percentage else number


def apply_edit(assumptions: Assumptions, field: str, text: object) -> Assumptions:
    """
    Apply one operator edit and return the replacement Assumptions.

    Args:
        assumptions: Current record (left untouched)
        field: Wire name or attribute name of the edited field
        text: Raw input text as typed (numbers are accepted too)

    Returns:
        New Assumptions with only the edited field changed

    Raises:
        UnknownFieldError: If field is not an Assumptions field
    """
    try:
        spec = get_field(field)
    except UnknownFieldError:
        logger.warning("Rejected edit for unknown field %r", field)
        raise

    value = from_display(text, spec.is_percentage)
    return assumptions.replace(**{spec.attribute: value})


def display_values(assumptions: Assumptions) -> Dict[str, str]:
    """Display text of every field, keyed by wire name."""
    return {
        spec.key: to_display(getattr(assumptions, spec.attribute), spec.is_percentage)
        for spec in FIELD_CATALOG
    }
