"""
sorting.py — Sort stage of the income statement pipeline.

sort_records() returns a new list; the input sequence is never reordered.

Ordering rules:
- "date" compares calendar dates, "revenue" / "netIncome" compare numbers.
- Descending flips the comparison, not the result list, so records with
  equal keys keep their input order in both directions (Python's sort is
  stable).
- Records with a missing key (null revenue, unparseable date) go after all
  records that have one, in both directions.
- Any other key leaves the input order unchanged.
"""

from __future__ import annotations

import math
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional, Sequence

from incomeview.models.financial_record import FinancialRecord, parse_statement_date
from incomeview.services.pipeline.criteria import SortCriteria, SortKey

KeyExtractor = Callable[[FinancialRecord], Any]


def _number(value: Optional[float]) -> Optional[float]:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    return value


SORT_KEY_EXTRACTORS: Dict[str, KeyExtractor] = {
    SortKey.DATE.value: lambda record: parse_statement_date(record.date),
    SortKey.REVENUE.value: lambda record: _number(record.revenue),
    SortKey.NET_INCOME.value: lambda record: _number(record.net_income),
}


def _make_comparator(extract: KeyExtractor, descending: bool) -> Callable[[FinancialRecord, FinancialRecord], int]:
    sign = -1 if descending else 1

    def compare(a: FinancialRecord, b: FinancialRecord) -> int:
        left, right = extract(a), extract(b)
        # Missing keys always sort last, independent of direction
        if left is None or right is None:
            if left is None and right is None:
                return 0
            return 1 if left is None else -1
        if left < right:
            return -sign
        if left > right:
            return sign
        return 0

    return compare


def sort_records(
    records: Sequence[FinancialRecord],
    criteria: SortCriteria,
) -> List[FinancialRecord]:
    """Return a sorted copy of `records` according to `criteria`."""
    ordered = list(records)
    extract = SORT_KEY_EXTRACTORS.get(criteria.key)
    if extract is None:
        return ordered
    ordered.sort(key=cmp_to_key(_make_comparator(extract, criteria.descending)))
    return ordered
