"""
Request and response bodies for the estimator endpoints.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from admissions_roi.app.models.assumptions import Assumptions


class EditRequest(BaseModel):
    """One operator edit applied to the current Assumptions.

    text is taken as typed: percentage fields use whole percents ("10"),
    and unparsable text becomes 0 rather than a validation error.
    """
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    assumptions: Assumptions = Field(default_factory=Assumptions, description="Current assumptions")
    field: str = Field(..., description="Field to edit, wire name (e.g. 'missedCallRate') or attribute name")
    text: Any = Field(default="", description="Input text as typed")


class ReportRequest(BaseModel):
    """Assumptions plus the card expand/collapse state to render."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    assumptions: Assumptions = Field(default_factory=Assumptions, description="Current assumptions")
    expanded: Optional[List[str]] = Field(
        default=None,
        description="Expanded cards (ella|juliana|sophy|connie); all when omitted"
    )
