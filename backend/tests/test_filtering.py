"""
Unit tests for filtering.py
"""

import math

import pytest

from incomeview.services.pipeline.criteria import FilterCriteria, ValueRange, YearRange
from incomeview.services.pipeline.filtering import extract_year, filter_records


@pytest.mark.parametrize(
    "date, expected",
    [
        ("2023-09-30", 2023),
        ("2020-01-01", 2020),
        ("1999-12-31", 1999),
        ("2023", 2023),
        (" 2021-03-31", 2021),
        ("FY-2023", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_year(date, expected):
    assert extract_year(date) == expected


def test_default_criteria_keep_all_five_years(records):
    result = filter_records(records, FilterCriteria())
    assert [r.date for r in result] == [r.date for r in records]


def test_filter_boundaries_are_inclusive(make_record):
    record = make_record(date="2020-09-26", revenue=100, netIncome=5)

    exact = FilterCriteria(
        year_range=YearRange(2020, 2020),
        revenue_range=ValueRange(100, 100),
    )
    assert filter_records([record], exact) == [record]

    later_years = FilterCriteria(year_range=YearRange(2021, 2024))
    assert filter_records([record], later_years) == []


def test_filter_by_year_range(records):
    result = filter_records(records, FilterCriteria(year_range=YearRange(2022, 2023)))
    assert [r.date for r in result] == ["2023-09-30", "2022-09-24"]


def test_filter_by_revenue_range(records):
    criteria = FilterCriteria(revenue_range=ValueRange(380_000_000_000, math.inf))
    result = filter_records(records, criteria)
    assert [r.date[:4] for r in result] == ["2024", "2023", "2022"]


def test_filter_by_net_income_range(records):
    criteria = FilterCriteria(net_income_range=ValueRange(0, 95_000_000_000))
    result = filter_records(records, criteria)
    assert [r.date[:4] for r in result] == ["2024", "2021", "2020"]


def test_all_three_ranges_must_hold(records):
    criteria = FilterCriteria(
        year_range=YearRange(2021, 2024),
        revenue_range=ValueRange(370_000_000_000, math.inf),
        net_income_range=ValueRange(95_000_000_000, math.inf),
    )
    result = filter_records(records, criteria)
    assert [r.date[:4] for r in result] == ["2023", "2022"]


def test_negative_net_income_excluded_by_default_minimum(make_record):
    loss = make_record(date="2022-12-31", revenue=10, netIncome=-5)
    assert filter_records([loss], FilterCriteria()) == []
    allow_losses = FilterCriteria(net_income_range=ValueRange(-math.inf, math.inf))
    assert filter_records([loss], allow_losses) == [loss]


def test_null_revenue_or_net_income_is_excluded(make_record):
    no_revenue = make_record(date="2022-12-31", netIncome=5)
    no_net_income = make_record(date="2023-12-31", revenue=5)
    complete = make_record(date="2024-12-31", revenue=5, netIncome=5)

    result = filter_records([no_revenue, no_net_income, complete], FilterCriteria())

    assert result == [complete]


def test_filter_preserves_input_order(records):
    shuffled = [records[2], records[0], records[4], records[1], records[3]]
    result = filter_records(shuffled, FilterCriteria(year_range=YearRange(2021, 2024)))
    assert result == [records[2], records[0], records[1], records[3]]


def test_filter_is_idempotent(records):
    criteria = FilterCriteria(
        year_range=YearRange(2021, 2023),
        revenue_range=ValueRange(370_000_000_000, math.inf),
    )
    once = filter_records(records, criteria)
    assert filter_records(once, criteria) == once


def test_filter_empty_dataset():
    assert filter_records([], FilterCriteria()) == []


def test_filter_does_not_mutate_input(records):
    original = list(records)
    filter_records(original, FilterCriteria(year_range=YearRange(2024, 2024)))
    assert original == list(records)
