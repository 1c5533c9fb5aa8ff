"""
Pytest configuration for estimator tests.

The environment variables are set at module level (not in pytest_configure)
because the rate limiter reads them when the routes module is imported
during pytest's collection phase.
"""

import os

# Set ENV=TEST to disable rate limiting BEFORE any modules are imported
os.environ["ENV"] = "TEST"
os.environ["DISABLE_RATE_LIMITS"] = "1"

import pytest

from admissions_roi.app.models.assumptions import Assumptions


@pytest.fixture
def defaults():
    """Baseline assumptions (3300 calls, 100 admissions, $13,000 per patient)."""
    return Assumptions()
