"""
filtering.py — Filter stage of the income statement pipeline.

A record passes when its year, revenue and net income all fall inside the
corresponding inclusive ranges. Null revenue / net income never satisfy a
range, so such records are filtered out. The stage is pure: input order is
preserved and the input is not touched.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from incomeview.models.financial_record import FinancialRecord
from incomeview.services.pipeline.criteria import Bound, FilterCriteria, ValueRange, YearRange

_LEADING_DIGITS = re.compile(r"^\s*\+?(\d+)")


def extract_year(date: Optional[str]) -> Optional[int]:
    """
    Year of a statement date: the leading digits before the first "-".

    "2023-09-30" -> 2023. Returns None when there are no leading digits.
    """
    if not isinstance(date, str):
        return None
    match = _LEADING_DIGITS.match(date.split("-", 1)[0])
    if match is None:
        return None
    return int(match.group(1))


def _within(value: Optional[float], low: Bound, high: Bound) -> bool:
    if value is None:
        return False
    return low <= value <= high


def matches_year(record: FinancialRecord, year_range: YearRange) -> bool:
    return _within(extract_year(record.date), year_range.start, year_range.end)


def matches_value(value: Optional[float], value_range: ValueRange) -> bool:
    return _within(value, value_range.min, value_range.max)


def record_matches(record: FinancialRecord, criteria: FilterCriteria) -> bool:
    return (
        matches_year(record, criteria.year_range)
        and matches_value(record.revenue, criteria.revenue_range)
        and matches_value(record.net_income, criteria.net_income_range)
    )


def filter_records(
    records: Sequence[FinancialRecord],
    criteria: FilterCriteria,
) -> List[FinancialRecord]:
    """Return the records that satisfy every range in `criteria`, in input order."""
    return [record for record in records if record_matches(record, criteria)]
