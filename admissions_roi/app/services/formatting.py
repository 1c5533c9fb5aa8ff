"""
Display formatting for estimator figures (US English, USD).

Extreme inputs can overflow a figure to infinity (or NaN, e.g. inf * 0);
those print as "∞", "-∞" and "NaN" instead of raising.
"""

import math


def _non_finite(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "-∞" if value < 0 else "∞"


def format_currency(value: float) -> str:
    """
    Format a dollar amount with thousands separators and no cents.

    Examples:
        1560000.4 -> "$1,560,000"
        -1234.5   -> "-$1,234"
        inf       -> "$∞"
    """
    if not math.isfinite(value):
        text = _non_finite(value)
        if text.startswith("-"):
            return f"-${text[1:]}"
        return f"${text}"
    rounded = round(value)
    if rounded == 0:
        return "$0"
    if rounded < 0:
        return f"-${abs(rounded):,.0f}"
    return f"${rounded:,.0f}"


def format_number(value: float, decimals: int = 0) -> str:
    """Format a count with thousands separators and fixed decimals."""
    if not math.isfinite(value):
        return _non_finite(value)
    text = f"{value:,.{decimals}f}"
    # -0 / -0.0 after rounding
    if text.startswith("-") and float(text[1:].replace(",", "")) == 0:
        return text[1:]
    return text


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a fraction as a percentage, e.g. 0.0303 -> "3.0%"."""
    return f"{format_number(value * 100, decimals)}%"
