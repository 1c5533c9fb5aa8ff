#!/usr/bin/env python3
"""
ROI Report - Offline CLI Tool

Prints the admissions ROI calculator view for the baseline assumptions, or
for edits given on the command line, without running the API.

Usage:
    python tools/roi_report.py
    python tools/roi_report.py --set missedCallRate=20 --set monthlyAdmissions=120
    python tools/roi_report.py --collapse juliana --collapse sophy
    python tools/roi_report.py --json

Edits are typed the way the calculator's inputs show them: percentage
fields take whole percents ("20" means 20%), and unparsable text becomes 0.

Exit Codes:
    0 - Report printed
    2 - ERROR: unknown field or card, or malformed --set
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

# Allow running as `python tools/roi_report.py` without setting PYTHONPATH
# manually: insert the repo root so admissions_roi imports resolve.
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from admissions_roi.app.models.assumptions import Assumptions  # noqa: E402
from admissions_roi.app.services.inputs import UnknownFieldError, apply_edit  # noqa: E402
from admissions_roi.app.services.report import (  # noqa: E402
    CARD_KEYS,
    CardState,
    RoiReport,
    UnknownCardError,
    build_report,
)


logger = logging.getLogger("roi_report")

# Color codes for terminal output
GREEN = '\033[92m'
RED = '\033[91m'
BLUE = '\033[94m'
DIM = '\033[2m'
RESET = '\033[0m'
BOLD = '\033[1m'


def print_header(text: str):
    """Print a formatted header."""
    print(f"\n{BOLD}{BLUE}{'='*70}{RESET}")
    print(f"{BOLD}{BLUE}{text:^70}{RESET}")
    print(f"{BOLD}{BLUE}{'='*70}{RESET}\n")


def print_error(text: str):
    """Print error message in red."""
    print(f"{RED}✗ {text}{RESET}", file=sys.stderr)


def print_row(label: str, value: str, sub_value: Optional[str] = None, highlight: bool = False):
    """Print one label/value line, highlighted rows in green."""
    color = GREEN if highlight else ""
    print(f"  {color}{label:<40}{value:>26}{RESET if highlight else ''}")
    if sub_value:
        print(f"  {DIM}  {sub_value}{RESET}")


def parse_edit(raw: str) -> tuple:
    """Split a FIELD=TEXT argument."""
    field, sep, text = raw.partition("=")
    if not sep or not field.strip():
        raise ValueError(f"expected FIELD=TEXT, got {raw!r}")
    return field.strip(), text


def render(report: RoiReport):
    """Print the report the way the calculator lays it out."""
    print_header("ROI Calculator")

    print(f"  {BOLD}Total Annual Impact{RESET}{report.total_annual_impact:>47}")

    print(f"\n{BOLD}{report.global_card.title}{RESET}")
    for field in report.global_card.inputs:
        print_row(field.label, field.value)
    row = report.global_card.conversion_rate
    print_row(row.label, row.value, row.sub_value, row.highlight)

    print(f"\n{BOLD}Projected Annual Impact{RESET}")
    for bar in report.chart:
        print_row(bar.name, bar.label)

    for card in report.cards:
        marker = "▾" if card.expanded else "▸"
        print(f"\n{BOLD}{marker} {card.title}{RESET} ({card.agent})"
              f"  {card.headline_label}: {BOLD}{card.headline_value}{RESET}")
        for field in card.inputs:
            suffix = "%" if field.is_percentage else ""
            print_row(field.label, f"{field.value}{suffix}", field.sub_label)
        for row in card.rows:
            print_row(row.label, row.value, row.sub_value, row.highlight)
    print()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print the admissions call-center ROI report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0  report printed
  2  ERROR - unknown field or card, malformed --set
""",
    )
    parser.add_argument(
        "--set",
        dest="edits",
        action="append",
        default=[],
        metavar="FIELD=TEXT",
        help="Edit one assumption as typed in the calculator (repeatable)",
    )
    parser.add_argument(
        "--collapse",
        action="append",
        default=[],
        choices=CARD_KEYS,
        help="Collapse a sub-model card (repeatable)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the computed figures as JSON instead of the report",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    assumptions = Assumptions()
    try:
        for raw in args.edits:
            field, text = parse_edit(raw)
            assumptions = apply_edit(assumptions, field, text)
    except ValueError as e:
        print_error(str(e))
        return 2
    except UnknownFieldError as e:
        print_error(f"Unknown assumptions field: {e.field}")
        return 2

    cards = CardState()
    try:
        for card in args.collapse:
            if cards.is_expanded(card):
                cards = cards.toggle(card)
    except UnknownCardError as e:
        print_error(f"Unknown card: {e.card}")
        return 2

    report = build_report(assumptions, cards)

    if args.json:
        print(json.dumps(report.result.model_dump(mode="json", by_alias=True), indent=2))
    else:
        render(report)

    logger.debug("Rendered report for %d edit(s)", len(args.edits))
    return 0


if __name__ == "__main__":
    sys.exit(main())
