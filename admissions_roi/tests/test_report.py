"""
Tests for the presentation layer: card state and the formatted report.
"""

import pytest

from admissions_roi.app.models.assumptions import Assumptions
from admissions_roi.app.services.report import (
    ACCENT_COLORS,
    CARD_KEYS,
    CardState,
    UnknownCardError,
    build_report,
)


# ============================================================================
# Card State
# ============================================================================

def test_all_cards_expanded_by_default():
    state = CardState()

    assert all(state.is_expanded(key) for key in CARD_KEYS)


def test_toggle_collapses_and_expands():
    state = CardState()

    collapsed = state.toggle("juliana")
    assert not collapsed.is_expanded("juliana")
    assert collapsed.is_expanded("ella")
    # Original state untouched
    assert state.is_expanded("juliana")

    expanded = collapsed.toggle("juliana")
    assert expanded == state


def test_toggle_unknown_card():
    with pytest.raises(UnknownCardError):
        CardState().toggle("global")


def test_from_keys():
    state = CardState.from_keys(["sophy"])

    assert state.expanded == frozenset({"sophy"})


def test_from_keys_unknown_card():
    with pytest.raises(UnknownCardError) as exc_info:
        CardState.from_keys(["ella", "bob"])

    assert exc_info.value.card == "bob"


# ============================================================================
# Report
# ============================================================================

def test_report_header_and_global_card(defaults):
    report = build_report(defaults)

    assert report.total_annual_impact == "$3,048,600"
    assert report.global_card.conversion_rate.label == "Current Conversion Rate"
    assert report.global_card.conversion_rate.value == "3.0%"
    assert report.global_card.conversion_rate.sub_value == "Admissions / Inbound Calls"
    assert [row.value for row in report.global_card.inputs] == ["3300", "100", "13000"]


def test_report_chart_sorted_with_colors(defaults):
    report = build_report(defaults)

    assert [bar.name for bar in report.chart] == [
        "Missed Calls (Ella)",
        "Alumni (Sophy)",
        "Outbound Opp (Juliana)",
        "Assessments (Connie)",
    ]
    assert [bar.label for bar in report.chart] == ["$1,560,000", "$780,000", "$678,600", "$30,000"]
    for bar in report.chart:
        assert bar.color == ACCENT_COLORS[bar.key]


def test_report_card_headlines(defaults):
    cards = {card.key: card for card in build_report(defaults).cards}

    assert [key for key in cards] == list(CARD_KEYS)
    assert cards["ella"].title == "Missed Calls"
    assert cards["ella"].headline_label == "Annual Impact"
    assert cards["ella"].headline_value == "$1,560,000"
    assert cards["juliana"].agent == "Juliana"
    assert cards["connie"].headline_label == "Annual Savings"
    assert cards["connie"].headline_value == "$30,000"


def test_report_ella_rows(defaults):
    ella = build_report(defaults).cards[0]

    rows = {row.label: row for row in ella.rows}
    assert rows["Missed/Abandoned Calls"].value == "330"
    assert rows["Recoverable Admissions"].value == "10.0"
    assert rows["Monthly Revenue"].value == "$130,000"
    assert rows["Monthly Revenue"].highlight
    assert ella.inputs[0].key == "missedCallRate"
    assert ella.inputs[0].value == "10"
    assert ella.inputs[0].is_percentage


def test_report_juliana_rows(defaults):
    juliana = build_report(defaults).cards[1]

    rows = {row.label: row for row in juliana.rows}
    assert rows["Total Calls"].value == "3,300"
    assert rows["Total Calls"].sub_value == "From Global Assumptions"
    assert rows["# of Qualified Opportunities"].value == "825"
    assert rows["# of Lost Opportunities"].value == "725"
    assert rows["Outbound Calls by Juliana"].value == "2,900"
    assert rows["Additional Monthly Revenue"].value == "$56,550"


def test_report_sophy_rows(defaults):
    sophy = build_report(defaults).cards[2]

    rows = {row.label: row for row in sophy.rows}
    assert rows["Total Alumni"].value == "1,000"
    assert rows["Outbound Calls by Sophy"].value == "4,000"
    assert rows["Contacts per Month"].value == "200"
    assert rows["Additional Admissions"].value == "5.0"
    assert rows["Additional Admissions"].sub_value == "0.5% of Total Alumni"
    assert rows["Monthly Cash Flow"].value == "$65,000"


def test_report_connie_rows(defaults):
    connie = build_report(defaults).cards[3]

    rows = {row.label: row for row in connie.rows}
    assert rows["Assessments Handled"].value == "3,000"
    assert rows["FTE Hours Saved"].value == "1,000.0"
    assert rows["Hourly Rate"].value == "$30"


def test_collapsed_cards_keep_headline_only(defaults):
    report = build_report(defaults, CardState.from_keys(["connie"]))
    cards = {card.key: card for card in report.cards}

    for key in ("ella", "juliana", "sophy"):
        assert not cards[key].expanded
        assert cards[key].rows == []
        assert cards[key].inputs == []
        assert cards[key].headline_value.startswith("$")

    assert cards["connie"].expanded
    assert len(cards["connie"].rows) == 3


def test_report_carries_raw_result(defaults):
    report = build_report(defaults)

    assert report.result.total_annual_impact == pytest.approx(3_048_600.0)
    assert report.result.assumptions == defaults


# ============================================================================
# Overflow
# ============================================================================

def test_report_with_overflowing_inputs():
    """Finite inputs whose products overflow still render."""
    huge = Assumptions(monthly_inbound_calls=1e308, missed_call_rate=10.0)

    report = build_report(huge)

    assert report.total_annual_impact == "$∞"
    ella = report.cards[0]
    assert ella.headline_value == "$∞"
    rows = {row.label: row for row in ella.rows}
    assert rows["Missed/Abandoned Calls"].value == "∞"
    assert report.chart[0].label == "$∞"


def test_report_with_nan_figures():
    """inf * 0 (no admissions) yields NaN, shown as text."""
    huge = Assumptions(monthly_inbound_calls=1e308, missed_call_rate=10.0, monthly_admissions=0)

    report = build_report(huge)

    assert report.global_card.conversion_rate.value == "0.0%"
    ella = report.cards[0]
    rows = {row.label: row for row in ella.rows}
    assert rows["Recoverable Admissions"].value == "NaN"
    assert ella.headline_value == "$NaN"
    assert report.total_annual_impact == "$NaN"
