"""
cli.py — Print the income statement table in a terminal.

Fetches the annual income statements once, applies the filter and sort
options, and prints the same table the API serves.

Usage:
    incomeview --year-start 2022 --year-end 2023 --sort revenue --desc
    incomeview --env-file backend/.env --revenue-min 300000000000

Exit status: 0 on success (including an empty table), 1 when the fetch
failed, 2 for invalid options.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from incomeview.core.config import Settings
from incomeview.core.logging import configure_logging, get_logger
from incomeview.services.pipeline.criteria import InvalidFilterValue, SortCriteria, SortKey
from incomeview.services.pipeline.table import TableView
from incomeview.services.statement_controller import FetchStatus, StatementController

logger = get_logger(__name__)

# option dest -> filter control name
FILTER_OPTIONS = {
    "year_start": "yearRange.start",
    "year_end": "yearRange.end",
    "revenue_min": "revenueRange.min",
    "revenue_max": "revenueRange.max",
    "net_income_min": "netIncomeRange.min",
    "net_income_max": "netIncomeRange.max",
}

COLUMN_GAP = "  "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="incomeview",
        description="Show annual income statements as a filtered, sorted table",
    )
    parser.add_argument(
        "--symbol",
        type=str,
        default=None,
        help="Stock ticker symbol (default: FMP_SYMBOL, AAPL)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Load FMP_API_URL / FMP_API_KEY from this .env file",
    )
    parser.add_argument("--year-start", type=str, default=None, help="First fiscal year (2020-2024)")
    parser.add_argument("--year-end", type=str, default=None, help="Last fiscal year (2020-2024)")
    parser.add_argument("--revenue-min", type=str, default=None, help="Minimum revenue (USD)")
    parser.add_argument("--revenue-max", type=str, default=None, help="Maximum revenue (USD)")
    parser.add_argument("--net-income-min", type=str, default=None, help="Minimum net income (USD)")
    parser.add_argument("--net-income-max", type=str, default=None, help="Maximum net income (USD)")
    parser.add_argument(
        "--sort",
        choices=[key.value for key in SortKey],
        default=SortKey.DATE.value,
        help="Sort column (default: date)",
    )
    parser.add_argument(
        "--desc",
        action="store_true",
        help="Sort descending",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="DEBUG, INFO, WARNING, ERROR (default: LOG_LEVEL or INFO)",
    )
    return parser


def render_text(view: TableView) -> str:
    """Render a TableView as plain text: title, then the table or the status message."""
    lines = [view.title, ""]
    if view.message is not None:
        lines.append(view.message)
        return "\n".join(lines)

    labels = [header.label for header in view.headers]
    widths = [len(label) for label in labels]
    for row in view.rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

    lines.append(COLUMN_GAP.join(label.center(width) for label, width in zip(labels, widths)).rstrip())
    lines.append(COLUMN_GAP.join("-" * width for width in widths))
    for row in view.rows:
        lines.append(COLUMN_GAP.join(cell.rjust(width) for cell, width in zip(row, widths)))
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.env_file:
        load_dotenv(args.env_file, override=True)

    try:
        settings = Settings()
    except (ValidationError, ValueError) as e:
        parser.error(f"invalid configuration: {e}")

    configure_logging(args.log_level or settings.LOG_LEVEL)

    if args.symbol:
        settings.FMP_SYMBOL = args.symbol.strip().upper()

    controller = StatementController.from_settings(settings)

    try:
        for dest, control in FILTER_OPTIONS.items():
            raw = getattr(args, dest)
            if raw is not None:
                controller.set_filter(control, raw)
    except InvalidFilterValue as e:
        parser.error(str(e))

    controller.set_sort(SortCriteria(key=args.sort, direction="desc" if args.desc else "asc"))

    status = controller.load()
    view = controller.table_view()
    logger.debug(f"Rendering {len(view.rows)} row(s), status={view.status}")
    print(render_text(view))

    if status == FetchStatus.FAILED:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
