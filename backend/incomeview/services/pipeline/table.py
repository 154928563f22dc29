"""
table.py — Presentation of the income statement table.

Turns the sorted records plus the controller state into a TableView: the
title, the column headers (with a sort arrow on the active column), one row
of display strings per record, and the message shown instead of the table
while loading, after a failure, or when no record survives the filters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel

from incomeview.models.financial_record import FinancialRecord
from incomeview.services.pipeline.criteria import (
    YEAR_OPTIONS,
    FilterCriteria,
    SortCriteria,
    SortDirection,
    SortKey,
)
from incomeview.services.pipeline.formatting import format_magnitude, format_verbatim

LOADING_MESSAGE = "Loading..."
EMPTY_MESSAGE = "No data available"
SHOW_FILTERS_LABEL = "Show Filters"
HIDE_FILTERS_LABEL = "Hide Filters"

ARROWS = {
    SortDirection.ASC.value: " ↑",
    SortDirection.DESC.value: " ↓",
}


@dataclass(frozen=True)
class Column:
    field: str
    label: str
    formatter: Callable[[object], str]
    sort_key: Optional[str] = None


COLUMNS: tuple = (
    Column("date", "Year", format_verbatim, sort_key=SortKey.DATE.value),
    Column("revenue", "Revenue", format_magnitude, sort_key=SortKey.REVENUE.value),
    Column("net_income", "Net Income", format_magnitude, sort_key=SortKey.NET_INCOME.value),
    Column("gross_profit", "Gross Profit", format_magnitude),
    Column("eps", "EPS", format_verbatim),
    Column("operating_income", "Operating Income", format_magnitude),
)


# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------

class TableHeader(BaseModel):
    field: str
    label: str
    sortKey: Optional[str] = None


class TableView(BaseModel):
    """Everything needed to draw the page for the current state."""
    status: str
    title: str
    message: Optional[str] = None
    headers: List[TableHeader]
    rows: List[List[str]]
    filtersVisible: bool
    filterToggleLabel: str
    # Unbounded limits are reported as null (JSON has no infinity)
    filters: Dict[str, Dict[str, Optional[Union[int, float]]]]
    sort: Dict[str, str]
    yearOptions: List[int]


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------

def table_title(symbol: str) -> str:
    return f"Income Statement for {symbol} (USD)"


def header_label(column: Column, sort: SortCriteria) -> str:
    if column.sort_key is not None and column.sort_key == sort.key:
        return column.label + ARROWS[sort.direction]
    return column.label


def build_headers(sort: SortCriteria) -> List[TableHeader]:
    return [
        TableHeader(field=column.field, label=header_label(column, sort), sortKey=column.sort_key)
        for column in COLUMNS
    ]


def build_row(record: FinancialRecord) -> List[str]:
    return [column.formatter(getattr(record, column.field)) for column in COLUMNS]


def build_rows(records: Sequence[FinancialRecord]) -> List[List[str]]:
    return [build_row(record) for record in records]


def filters_for_display(criteria: FilterCriteria) -> Dict[str, Dict[str, Optional[Union[int, float]]]]:
    return {
        group: {
            name: (None if isinstance(value, float) and math.isinf(value) else value)
            for name, value in bounds.items()
        }
        for group, bounds in criteria.as_dict().items()
    }


def status_message(status: str, error: Optional[str], row_count: int) -> Optional[str]:
    """Text shown instead of the table, or None when the table is shown."""
    if status in ("idle", "loading"):
        return LOADING_MESSAGE
    if status == "failed":
        return f"Error: {error}"
    if row_count == 0:
        return EMPTY_MESSAGE
    return None


def build_table_view(
    *,
    status: str,
    symbol: str,
    records: Sequence[FinancialRecord],
    error: Optional[str],
    filters_visible: bool,
    filters: FilterCriteria,
    sort: SortCriteria,
) -> TableView:
    rows = build_rows(records) if status == "ready" else []
    return TableView(
        status=status,
        title=table_title(symbol),
        message=status_message(status, error, len(rows)),
        headers=build_headers(sort),
        rows=rows,
        filtersVisible=filters_visible,
        filterToggleLabel=HIDE_FILTERS_LABEL if filters_visible else SHOW_FILTERS_LABEL,
        filters=filters_for_display(filters),
        sort={"key": sort.key, "direction": sort.direction},
        yearOptions=list(YEAR_OPTIONS),
    )
