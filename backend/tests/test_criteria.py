"""
Unit tests for criteria.py
"""

import math

import pytest

from incomeview.services.pipeline.criteria import (
    YEAR_OPTIONS,
    FilterCriteria,
    InvalidFilterValue,
    SortCriteria,
    SortKey,
    normalize_bound,
)


def test_defaults():
    criteria = FilterCriteria()
    assert criteria.year_range.start == 2020
    assert criteria.year_range.end == 2024
    assert criteria.revenue_range.min == 0
    assert criteria.revenue_range.max == math.inf
    assert criteria.net_income_range.min == 0
    assert criteria.net_income_range.max == math.inf
    assert SortCriteria() == SortCriteria("date", "asc")
    assert YEAR_OPTIONS == (2020, 2021, 2022, 2023, 2024)


@pytest.mark.parametrize(
    "raw, is_upper, expected",
    [
        ("", False, 0),
        ("", True, math.inf),
        ("   ", True, math.inf),
        (None, False, 0),
        (None, True, math.inf),
        ("100", False, 100),
        (" 42 ", True, 42),
        ("12.9", False, 12),
        ("5e3", False, 5),
        ("-7", False, -7),
        ("300000000000", True, 300000000000),
        (250, False, 250),
        (99.7, True, 99),
        (math.inf, True, math.inf),
    ],
)
def test_normalize_bound(raw, is_upper, expected):
    assert normalize_bound(raw, is_upper) == expected


@pytest.mark.parametrize("raw", ["abc", "e10", "-", ".5", math.nan, True, [1]])
def test_normalize_bound_rejects_non_numbers(raw):
    with pytest.raises(InvalidFilterValue):
        normalize_bound(raw, False)


def test_with_bound_returns_new_criteria():
    original = FilterCriteria()
    updated = original.with_bound("revenueRange.min", "1000")

    assert updated.revenue_range.min == 1000
    assert original.revenue_range.min == 0
    assert updated.year_range == original.year_range
    assert updated.net_income_range == original.net_income_range


def test_with_bound_empty_values_normalise_by_bound_side():
    criteria = (
        FilterCriteria()
        .with_bound("revenueRange.min", "5")
        .with_bound("revenueRange.max", "10")
        .with_bound("revenueRange.min", "")
        .with_bound("revenueRange.max", "")
        .with_bound("yearRange.end", "")
    )
    assert criteria.revenue_range.min == 0
    assert criteria.revenue_range.max == math.inf
    assert criteria.year_range.end == math.inf


def test_with_bound_years_limited_to_options():
    criteria = FilterCriteria().with_bound("yearRange.start", "2022")
    assert criteria.year_range.start == 2022

    with pytest.raises(InvalidFilterValue):
        criteria.with_bound("yearRange.end", "2019")
    with pytest.raises(InvalidFilterValue):
        criteria.with_bound("yearRange.start", "2025")


def test_with_bound_unknown_field():
    with pytest.raises(InvalidFilterValue, match="Unknown filter field"):
        FilterCriteria().with_bound("grossProfitRange.min", "1")


def test_invalid_filter_value_is_value_error():
    assert issubclass(InvalidFilterValue, ValueError)


def test_as_dict_uses_control_names():
    assert FilterCriteria().as_dict() == {
        "yearRange": {"start": 2020, "end": 2024},
        "revenueRange": {"min": 0, "max": math.inf},
        "netIncomeRange": {"min": 0, "max": math.inf},
    }


def test_toggle_same_key_ascending_flips_to_descending():
    assert SortCriteria().toggled("date") == SortCriteria("date", "desc")


def test_toggle_same_key_descending_returns_to_ascending():
    assert SortCriteria("date", "desc").toggled("date") == SortCriteria("date", "asc")


def test_toggle_other_key_selects_it_ascending():
    assert SortCriteria("date", "desc").toggled("revenue") == SortCriteria("revenue", "asc")
    assert SortCriteria("revenue", "asc").toggled(SortKey.NET_INCOME) == SortCriteria("netIncome", "asc")


def test_sort_criteria_accepts_enum_members():
    criteria = SortCriteria(SortKey.REVENUE, "desc")
    assert criteria.key == "revenue"
    assert criteria.descending is True


def test_sort_criteria_rejects_unknown_direction():
    with pytest.raises(ValueError):
        SortCriteria("date", "sideways")
