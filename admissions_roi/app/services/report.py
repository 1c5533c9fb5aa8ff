"""
Presentation layer for the ROI estimator.

Turns a DerivedResult into the formatted view the calculator shows: a header
total, the global assumptions card, a ranked bar chart and one card per
sub-model. Card expand/collapse state lives here, never in Assumptions.
"""

from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from admissions_roi.app.models.assumptions import Assumptions
from admissions_roi.app.services.estimator import DerivedResult, compute
from admissions_roi.app.services.formatting import (
    format_currency,
    format_number,
    format_percent,
)
from admissions_roi.app.services.inputs import fields_for_section, to_display


CARD_KEYS = ("ella", "juliana", "sophy", "connie")

ACCENT_COLORS = {
    "ella": "#3b82f6",
    "juliana": "#8b5cf6",
    "sophy": "#f59e0b",
    "connie": "#10b981",
}


class UnknownCardError(KeyError):
    """Raised when a view-state operation names a card that does not exist."""

    def __init__(self, card: str):
        super().__init__(card)
        self.card = card


class CardState(BaseModel):
    """Which sub-model cards are expanded. All of them by default."""

    model_config = ConfigDict(frozen=True)

    expanded: FrozenSet[str] = Field(default=frozenset(CARD_KEYS))

    @classmethod
    def from_keys(cls, keys) -> "CardState":
        keys = frozenset(keys)
        for key in keys:
            if key not in CARD_KEYS:
                raise UnknownCardError(key)
        return cls(expanded=keys)

    def is_expanded(self, card: str) -> bool:
        return card in self.expanded

    def toggle(self, card: str) -> "CardState":
        if card not in CARD_KEYS:
            raise UnknownCardError(card)
        if card in self.expanded:
            return CardState(expanded=self.expanded - {card})
        return CardState(expanded=self.expanded | {card})


class _ViewModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class ResultRow(_ViewModel):
    label: str
    value: str
    sub_value: Optional[str] = None
    highlight: bool = False


class InputRow(_ViewModel):
    key: str
    label: str
    sub_label: Optional[str] = None
    value: str = Field(..., description="Display text (whole percent for percentage fields)")
    is_percentage: bool = False
    step: str


class ChartBar(_ViewModel):
    key: str
    name: str
    value: float
    label: str = Field(..., description="Value formatted as currency")
    color: str


class GlobalCard(_ViewModel):
    title: str = "Global Assumptions"
    inputs: List[InputRow]
    conversion_rate: ResultRow


class SubModelCard(_ViewModel):
    key: str
    title: str
    agent: str
    color: str
    headline_label: str
    headline_value: str
    expanded: bool
    inputs: List[InputRow] = Field(default_factory=list)
    rows: List[ResultRow] = Field(default_factory=list)


class RoiReport(_ViewModel):
    """Formatted calculator view for one Assumptions snapshot."""

    total_annual_impact: str = Field(..., description="Header total, formatted as currency")
    global_card: GlobalCard
    chart: List[ChartBar] = Field(..., description="Ranked bars, largest first")
    cards: List[SubModelCard]
    result: DerivedResult


def _input_rows(assumptions: Assumptions, section: str) -> List[InputRow]:
    return [
        InputRow(
            key=spec.key,
            label=spec.label,
            sub_label=spec.sub_label,
            value=to_display(getattr(assumptions, spec.attribute), spec.is_percentage),
            is_percentage=spec.is_percentage,
            step=spec.input_step,
        )
        for spec in fields_for_section(section)
    ]


def _result_rows(card: str, r: DerivedResult) -> List[ResultRow]:
    if card == "ella":
        return [
            ResultRow(label="Missed/Abandoned Calls", value=format_number(r.missed_calls)),
            ResultRow(label="Recoverable Admissions", value=format_number(r.ella_add_admissions, 1)),
            ResultRow(label="Monthly Revenue", value=format_currency(r.ella_monthly_revenue), highlight=True),
        ]
    if card == "juliana":
        return [
            ResultRow(label="Total Calls", value=format_number(r.total_calls),
                      sub_value="From Global Assumptions"),
            ResultRow(label="# of Qualified Opportunities", value=format_number(r.qualified_opportunities)),
            ResultRow(label="Admissions", value=format_number(r.admissions),
                      sub_value="From Global Assumptions"),
            ResultRow(label="# of Lost Opportunities", value=format_number(r.lost_opportunities)),
            ResultRow(label="Outbound Calls by Juliana", value=format_number(r.juliana_calls_handled),
                      sub_value="Lost Opps × 4"),
            ResultRow(label="# of Additional Admits", value=format_number(r.juliana_add_admissions, 1)),
            ResultRow(label="Additional Monthly Revenue", value=format_currency(r.juliana_monthly_revenue),
                      highlight=True),
        ]
    if card == "sophy":
        conversion = format_percent(r.assumptions.alumni_conversion_rate, 1)
        return [
            ResultRow(label="Total Alumni", value=format_number(r.alumni_database_size)),
            ResultRow(label="Outbound Calls by Sophy", value=format_number(r.sophy_outbound_calls),
                      sub_value="Alumni × 4"),
            ResultRow(label="Contacts per Month", value=format_number(r.alumni_contacts_per_month)),
            ResultRow(label="Additional Admissions", value=format_number(r.sophy_add_admissions, 1),
                      sub_value=f"{conversion} of Total Alumni"),
            ResultRow(label="Monthly Cash Flow", value=format_currency(r.sophy_monthly_revenue),
                      highlight=True),
        ]
    return [
        ResultRow(label="Assessments Handled", value=format_number(r.connie_assessments_handled)),
        ResultRow(label="FTE Hours Saved", value=format_number(r.fte_hours_saved, 1)),
        ResultRow(label="Hourly Rate", value=format_currency(r.hourly_rate)),
    ]


_CARD_HEADINGS = {
    # key: (title, agent, headline label, DerivedResult attribute)
    "ella": ("Missed Calls", "Ella", "Annual Impact", "ella_annual_revenue"),
    "juliana": ("Outbound Lost Opp.", "Juliana", "Annual Impact", "juliana_annual_revenue"),
    "sophy": ("Alumni Re-Admission", "Sophy", "Annual Impact", "sophy_annual_revenue"),
    "connie": ("Assessments", "Connie", "Annual Savings", "connie_annual_savings"),
}


def build_report(
    assumptions: Assumptions, cards: Optional[CardState] = None
) -> RoiReport:
    """
    Compute and format the full calculator view.

    Collapsed cards keep their headline figure but carry no inputs or rows.

    Args:
        assumptions: Current Assumptions record
        cards: Expand/collapse state (all expanded when omitted)

    Returns:
        RoiReport with formatted figures and the raw DerivedResult
    """
    if cards is None:
        cards = CardState()
    result = compute(assumptions)

    global_card = GlobalCard(
        inputs=_input_rows(assumptions, "global"),
        conversion_rate=ResultRow(
            label="Current Conversion Rate",
            value=format_percent(result.conversion_rate, 1),
            sub_value="Admissions / Inbound Calls",
            highlight=True,
        ),
    )

    chart = [
        ChartBar(
            key=bar.key,
            name=bar.name,
            value=bar.value,
            label=format_currency(bar.value),
            color=ACCENT_COLORS[bar.key],
        )
        for bar in result.impact_ranking
    ]

    sub_model_cards = []
    for key in CARD_KEYS:
        title, agent, headline_label, attribute = _CARD_HEADINGS[key]
        expanded = cards.is_expanded(key)
        sub_model_cards.append(
            SubModelCard(
                key=key,
                title=title,
                agent=agent,
                color=ACCENT_COLORS[key],
                headline_label=headline_label,
                headline_value=format_currency(getattr(result, attribute)),
                expanded=expanded,
                inputs=_input_rows(assumptions, key) if expanded else [],
                rows=_result_rows(key, result) if expanded else [],
            )
        )

    return RoiReport(
        total_annual_impact=format_currency(result.total_annual_impact),
        global_card=global_card,
        chart=chart,
        cards=sub_model_cards,
        result=result,
    )
