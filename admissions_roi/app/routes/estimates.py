"""
ROI estimation endpoints for the admissions call-center calculator.

Every endpoint is a pure computation over the Assumptions in the request.
Nothing is stored between requests - the client keeps the current record and
sends it back with each edit.
"""

import logging
import os
from typing import List

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from slowapi import Limiter
from slowapi.util import get_remote_address

from admissions_roi.app.models.assumptions import Assumptions
from admissions_roi.app.models.requests import EditRequest, ReportRequest
from admissions_roi.app.services.estimator import DerivedResult, compute
from admissions_roi.app.services.inputs import (
    FIELD_CATALOG,
    UnknownFieldError,
    apply_edit,
    to_display,
)
from admissions_roi.app.services.report import (
    CardState,
    RoiReport,
    UnknownCardError,
    build_report,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/roi", tags=["roi"])


# Rate limiter instance (respects ENV=TEST for disabling in tests)
def get_roi_limiter():
    """Create rate limiter that respects test mode environment variables."""
    disable_limits = (
        os.environ.get("ENV") == "TEST" or os.environ.get("DISABLE_RATE_LIMITS") == "1"
    )
    return Limiter(key_func=get_remote_address, enabled=not disable_limits)


limiter = get_roi_limiter()


class FieldDescriptor(BaseModel):
    """Catalog entry returned by /fields."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    key: str
    label: str
    sub_label: str | None = None
    section: str
    is_percentage: bool
    step: str
    default: float
    default_display: str


class EditResponse(BaseModel):
    """Replacement Assumptions after an edit, with its recomputed result."""
    assumptions: Assumptions
    result: DerivedResult


@router.get("/defaults", response_model=Assumptions)
async def roi_defaults() -> Assumptions:
    """Baseline assumptions the calculator starts from."""
    return Assumptions()


@router.get("/fields", response_model=List[FieldDescriptor])
async def roi_fields() -> List[FieldDescriptor]:
    """
    Editable fields with labels, grouping and default display values.

    Percentage fields report their default both as the stored fraction
    (default) and as the whole-percent text shown in the input
    (default_display).
    """
    defaults = Assumptions()
    return [
        FieldDescriptor(
            key=spec.key,
            label=spec.label,
            sub_label=spec.sub_label,
            section=spec.section,
            is_percentage=spec.is_percentage,
            step=spec.input_step,
            default=getattr(defaults, spec.attribute),
            default_display=to_display(getattr(defaults, spec.attribute), spec.is_percentage),
        )
        for spec in FIELD_CATALOG
    ]


@router.post("/estimate", response_model=DerivedResult)
@limiter.limit("300/minute")
async def roi_estimate(request: Request, assumptions: Assumptions) -> DerivedResult:
    """
    Compute every sub-model for the given assumptions.

    Any field may be omitted (its default applies). Non-numeric values are
    treated as 0, never rejected.

    Example (defaults):
    ```json
    {
        "monthlyInboundCalls": 3300,
        "monthlyAdmissions": 100,
        "avgNetPatientRevenue": 13000,
        "missedCallRate": 0.1
    }
    ```

    Returns:
    - Every intermediate and annual figure of Ella, Juliana, Sophy and Connie
    - totalAnnualImpact and the impact ranking, largest first
    - Assumptions echoed back
    """
    return compute(assumptions)


@router.post("/edit", response_model=EditResponse)
@limiter.limit("600/minute")
async def roi_edit(request: Request, body: EditRequest) -> EditResponse:
    """
    Apply one input edit and return the replacement assumptions.

    The text is interpreted the way the input widget shows it: percentage
    fields take whole percents ("10" -> 0.10) and unparsable text becomes 0.
    """
    try:
        assumptions = apply_edit(body.assumptions, body.field, body.text)
    except UnknownFieldError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "unknown_field",
                "message": f"Unknown assumptions field: {e.field}"
            }
        )

    return EditResponse(assumptions=assumptions, result=compute(assumptions))


@router.post("/report", response_model=RoiReport)
@limiter.limit("300/minute")
async def roi_report(request: Request, body: ReportRequest) -> RoiReport:
    """Formatted calculator view: header total, chart bars and sub-model cards."""
    try:
        cards = CardState() if body.expanded is None else CardState.from_keys(body.expanded)
    except UnknownCardError as e:
        logger.warning("Rejected report for unknown card %r", e.card)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "unknown_card",
                "message": f"Unknown card: {e.card}"
            }
        )

    return build_report(body.assumptions, cards)
