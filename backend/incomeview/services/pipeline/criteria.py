"""
criteria.py — Filter and sort criteria for the income statement table.

Criteria are immutable. Every user input produces a new criteria object:

    criteria = criteria.with_bound("revenueRange.min", "1000")
    sort = sort.toggled("revenue")

Bound normalisation follows the number inputs of the web client the table
was first built for:
- empty input  -> 0 for a min/start bound, +inf for a max/end bound
- otherwise    -> the leading integer of the text ("12.9" -> 12, "5e3" -> 5)
- no leading digits -> InvalidFilterValue, criteria unchanged
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Tuple, Union

Bound = Union[int, float]

# Year selects offer a fixed five-year window
YEAR_OPTIONS: Tuple[int, ...] = tuple(range(2020, 2025))
DEFAULT_YEAR_START = 2020
DEFAULT_YEAR_END = 2024

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


class InvalidFilterValue(ValueError):
    """Raised when a filter control value cannot be turned into a bound."""


class SortKey(str, Enum):
    DATE = "date"
    REVENUE = "revenue"
    NET_INCOME = "netIncome"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


# -----------------------------------------------------------------------------
# Filter criteria
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class YearRange:
    start: Bound = DEFAULT_YEAR_START
    end: Bound = DEFAULT_YEAR_END


@dataclass(frozen=True)
class ValueRange:
    min: Bound = 0
    max: Bound = math.inf


@dataclass(frozen=True)
class FilterCriteria:
    """Three independent inclusive ranges; a record must satisfy all of them."""
    year_range: YearRange = field(default_factory=YearRange)
    revenue_range: ValueRange = field(default_factory=ValueRange)
    net_income_range: ValueRange = field(default_factory=ValueRange)

    def with_bound(self, name: str, raw: Any) -> "FilterCriteria":
        """
        Return a copy with one bound replaced.

        Args:
            name: Dotted control name, e.g. "yearRange.start" or "netIncomeRange.max"
            raw: Control value (string from a text input, number, or None)

        Raises:
            InvalidFilterValue: Unknown name, unparseable value, or a year
                outside YEAR_OPTIONS
        """
        try:
            range_attr, bound_attr, is_upper = FILTER_FIELDS[name]
        except KeyError:
            raise InvalidFilterValue(f"Unknown filter field: {name!r}") from None

        value = normalize_bound(raw, is_upper)
        if range_attr == "year_range" and not _is_empty(raw) and value not in YEAR_OPTIONS:
            options = ", ".join(str(y) for y in YEAR_OPTIONS)
            raise InvalidFilterValue(f"{name} must be one of {options}, got {raw!r}")

        current = getattr(self, range_attr)
        return replace(self, **{range_attr: replace(current, **{bound_attr: value})})

    def as_dict(self) -> Dict[str, Dict[str, Bound]]:
        """Dotted-name view of the criteria, keyed like the filter controls."""
        return {
            "yearRange": {"start": self.year_range.start, "end": self.year_range.end},
            "revenueRange": {"min": self.revenue_range.min, "max": self.revenue_range.max},
            "netIncomeRange": {"min": self.net_income_range.min, "max": self.net_income_range.max},
        }


# control name -> (criteria attribute, bound attribute, is upper bound)
FILTER_FIELDS: Dict[str, Tuple[str, str, bool]] = {
    "yearRange.start": ("year_range", "start", False),
    "yearRange.end": ("year_range", "end", True),
    "revenueRange.min": ("revenue_range", "min", False),
    "revenueRange.max": ("revenue_range", "max", True),
    "netIncomeRange.min": ("net_income_range", "min", False),
    "netIncomeRange.max": ("net_income_range", "max", True),
}


def _is_empty(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and raw.strip() == "")


def normalize_bound(raw: Any, is_upper: bool) -> Bound:
    """
    Turn a control value into a numeric bound.

    Empty values become 0 (lower bounds) or +inf (upper bounds). Strings are
    read up to the end of their leading integer. Numbers are truncated toward
    zero; infinities are kept.
    """
    if _is_empty(raw):
        return math.inf if is_upper else 0

    if isinstance(raw, bool):
        raise InvalidFilterValue(f"Not a number: {raw!r}")

    if isinstance(raw, (int, float)):
        if math.isnan(raw):
            raise InvalidFilterValue("Not a number: nan")
        if math.isinf(raw):
            return raw
        return int(raw)

    if isinstance(raw, str):
        match = _LEADING_INTEGER.match(raw)
        if match:
            return int(match.group(1))

    raise InvalidFilterValue(f"Not a number: {raw!r}")


# -----------------------------------------------------------------------------
# Sort criteria
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SortCriteria:
    """
    Active sort column and direction.

    `key` is kept as a plain string: keys outside SortKey are allowed and
    leave the order unchanged.
    """
    key: str = SortKey.DATE.value
    direction: str = SortDirection.ASC.value

    def __post_init__(self):
        key = self.key.value if isinstance(self.key, SortKey) else str(self.key)
        direction = SortDirection(self.direction).value
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "direction", direction)

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC.value

    def toggled(self, key: str) -> "SortCriteria":
        """
        Header click: the active ascending column flips to descending,
        anything else selects the clicked column ascending.
        """
        key = key.value if isinstance(key, SortKey) else str(key)
        if key == self.key and self.direction == SortDirection.ASC.value:
            return SortCriteria(key=key, direction=SortDirection.DESC.value)
        return SortCriteria(key=key, direction=SortDirection.ASC.value)
