"""
pipeline — filter → sort → format stages for income statement records.

Every stage is a pure function of its inputs; the controller re-runs them
from scratch whenever the dataset or the criteria change.
"""

from incomeview.services.pipeline.criteria import (
    YEAR_OPTIONS,
    FilterCriteria,
    InvalidFilterValue,
    SortCriteria,
    SortDirection,
    SortKey,
    ValueRange,
    YearRange,
)
from incomeview.services.pipeline.filtering import extract_year, filter_records
from incomeview.services.pipeline.formatting import format_magnitude, format_verbatim
from incomeview.services.pipeline.sorting import sort_records
from incomeview.services.pipeline.table import TableView, build_table_view

__all__ = [
    "YEAR_OPTIONS",
    "FilterCriteria",
    "InvalidFilterValue",
    "SortCriteria",
    "SortDirection",
    "SortKey",
    "ValueRange",
    "YearRange",
    "extract_year",
    "filter_records",
    "format_magnitude",
    "format_verbatim",
    "sort_records",
    "TableView",
    "build_table_view",
]
