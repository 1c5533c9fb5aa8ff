"""
Pydantic models for the admissions ROI estimator.
"""

from admissions_roi.app.models.assumptions import Assumptions, parse_number
from admissions_roi.app.models.requests import EditRequest, ReportRequest

__all__ = ["Assumptions", "EditRequest", "ReportRequest", "parse_number"]
