"""
Assumptions record for the admissions ROI estimator.

The record is immutable: every operator edit produces a new Assumptions via
``replace`` instead of mutating a field in place. Construction never fails on
bad field values - anything that is not a finite number becomes 0, and a
missing field falls back to its baseline default.

Percentage fields (missed_call_rate, qualified_opportunities_percent, ...)
are stored as fractions (0.10 == 10%).
"""

import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# Longest leading decimal literal, the same prefix a browser's parseFloat accepts
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(value: Any) -> float:
    """
    Coerce an arbitrary input value to a finite float.

    Numeric text is read up to the first character that cannot continue a
    decimal literal ("12abc" -> 12.0). Booleans, containers, unparsable text,
    NaN and infinities all become 0.0.

    Args:
        value: Raw field value (number, text, or anything else)

    Returns:
        Finite float, 0.0 when the value is not numeric
    """
    if isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if match is None:
            return 0.0
        number = float(match.group(1))
    else:
        return 0.0

    return number if math.isfinite(number) else 0.0


class Assumptions(BaseModel):
    """
    Operator-editable inputs driving every sub-model.

    Attribute names are snake_case; the JSON wire format uses camelCase
    (monthlyInboundCalls, missedCallRate, ...). Both are accepted on input.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    # Global
    monthly_inbound_calls: float = Field(
        default=3300.0,
        description="Inbound calls received per month"
    )
    monthly_admissions: float = Field(
        default=100.0,
        description="Admissions per month"
    )
    avg_net_patient_revenue: float = Field(
        default=13000.0,
        description="Average net revenue per admitted patient in USD"
    )

    # Missed Calls (Ella)
    missed_call_rate: float = Field(
        default=0.10,
        description="Fraction of inbound calls missed or abandoned"
    )

    # Outbound Lost Opportunity (Juliana)
    qualified_opportunities_percent: float = Field(
        default=0.25,
        description="Fraction of inbound calls that are qualified opportunities"
    )
    lost_opportunity_conversion_rate: float = Field(
        default=0.006,
        description="Fraction of lost opportunities converted by outbound follow-up"
    )

    # Alumni Re-Admission (Sophy)
    alumni_database_size: float = Field(
        default=1000.0,
        description="Number of alumni in the database"
    )
    alumni_contacts_per_month: float = Field(
        default=200.0,
        description="Alumni contacted per month (informational, feeds no formula)"
    )
    alumni_conversion_rate: float = Field(
        default=0.005,
        description="Fraction of alumni re-admitted"
    )

    # Assessments (Connie)
    annual_assessments: float = Field(
        default=3000.0,
        description="Assessments performed per year"
    )
    minutes_per_assessment: float = Field(
        default=20.0,
        description="Staff minutes spent per assessment"
    )
    assessments_handled_rate: float = Field(
        default=1.0,
        description="Fraction of assessments handled by the agent"
    )
    hourly_rate: float = Field(
        default=30.0,
        description="Fully loaded FTE hourly cost in USD"
    )

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        """Treat explicit nulls as absent so the field keeps its default."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    @field_validator("*", mode="before")
    @classmethod
    def coerce_number(cls, value: Any) -> float:
        return parse_number(value)

    def replace(self, **changes: Any) -> "Assumptions":
        """Return a new record with the given attributes replaced."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)
