"""Shared fixtures: a five-year AAPL income statement payload and stub fetchers."""

from typing import Any, Dict, List

import pytest

from incomeview.data.fmp_client import FetchError, parse_income_statements
from incomeview.services.statement_controller import StatementController


# FMP returns the most recent fiscal year first
AAPL_INCOME_STATEMENTS: List[Dict[str, Any]] = [
    {
        "date": "2024-09-28",
        "symbol": "AAPL",
        "calendarYear": "2024",
        "period": "FY",
        "revenue": 391035000000,
        "costOfRevenue": 210352000000,
        "grossProfit": 180683000000,
        "operatingIncome": 123216000000,
        "netIncome": 93736000000,
        "eps": 6.11,
    },
    {
        "date": "2023-09-30",
        "symbol": "AAPL",
        "calendarYear": "2023",
        "period": "FY",
        "revenue": 383285000000,
        "costOfRevenue": 214137000000,
        "grossProfit": 169148000000,
        "operatingIncome": 114301000000,
        "netIncome": 96995000000,
        "eps": 6.16,
    },
    {
        "date": "2022-09-24",
        "symbol": "AAPL",
        "calendarYear": "2022",
        "period": "FY",
        "revenue": 394328000000,
        "costOfRevenue": 223546000000,
        "grossProfit": 170782000000,
        "operatingIncome": 119437000000,
        "netIncome": 99803000000,
        "eps": 6.15,
    },
    {
        "date": "2021-09-25",
        "symbol": "AAPL",
        "calendarYear": "2021",
        "period": "FY",
        "revenue": 365817000000,
        "costOfRevenue": 212981000000,
        "grossProfit": 152836000000,
        "operatingIncome": 108949000000,
        "netIncome": 94680000000,
        "eps": 5.67,
    },
    {
        "date": "2020-09-26",
        "symbol": "AAPL",
        "calendarYear": "2020",
        "period": "FY",
        "revenue": 274515000000,
        "costOfRevenue": 169559000000,
        "grossProfit": 104956000000,
        "operatingIncome": 66288000000,
        "netIncome": 57411000000,
        "eps": 3.31,
    },
]


@pytest.fixture
def raw_statements() -> List[Dict[str, Any]]:
    return [dict(item) for item in AAPL_INCOME_STATEMENTS]


@pytest.fixture
def records(raw_statements):
    return parse_income_statements(raw_statements)


@pytest.fixture
def make_record():
    """Build a single record from keyword overrides."""
    def _make(date="2023-09-30", **fields):
        return parse_income_statements([{"date": date, **fields}])[0]
    return _make


class StubFetcher:
    """Records calls and returns a fixed dataset (or raises a FetchError)."""

    def __init__(self, records=(), error=None):
        self.records = records
        self.error = error
        self.calls = []

    def __call__(self, base_url, api_key, symbol):
        self.calls.append((base_url, api_key, symbol))
        if self.error is not None:
            raise FetchError(self.error)
        return self.records


@pytest.fixture
def stub_fetcher(records):
    return StubFetcher(records=records)


@pytest.fixture
def controller(stub_fetcher):
    return StatementController(
        base_url="https://financialmodelingprep.com/api/v3/income-statement/",
        api_key="test-key",
        symbol="AAPL",
        fetcher=stub_fetcher,
    )
