"""
financial_record.py — One fiscal year's income-statement line.

FMP returns camelCase keys (netIncome, grossProfit, ...) plus many fields we
do not display (symbol, calendarYear, costOfRevenue, ...). The model accepts
the API keys, ignores everything else, and exposes snake_case attributes.

Numeric fields are optional: a missing or null value stays None and is
handled downstream (excluded by range filters, sorted last, shown as "N/A").
"""

from __future__ import annotations

import datetime as dt
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATE_FORMAT = "%Y-%m-%d"


def parse_statement_date(value: Optional[str]) -> Optional[dt.date]:
    """
    Parse the YYYY-MM-DD prefix of a statement date.

    Returns None instead of raising, so callers in the sort stage stay total.
    """
    if not isinstance(value, str):
        return None
    try:
        return dt.datetime.strptime(value.strip()[:10], DATE_FORMAT).date()
    except ValueError:
        return None


class FinancialRecord(BaseModel):
    """Annual income statement figures, as-reported (not pre-scaled)."""
    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "date": "2023-09-30",
                "revenue": 383285000000,
                "netIncome": 96995000000,
                "grossProfit": 169148000000,
                "operatingIncome": 114301000000,
                "eps": 6.16,
            }
        },
    )

    date: str
    revenue: Optional[float] = None
    net_income: Optional[float] = Field(None, alias="netIncome")
    gross_profit: Optional[float] = Field(None, alias="grossProfit")
    operating_income: Optional[float] = Field(None, alias="operatingIncome")
    # Kept as received so it can be displayed verbatim (6 stays 6, 6.16 stays 6.16)
    eps: Optional[Union[int, float]] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        if parse_statement_date(v) is None:
            raise ValueError(f"date must be YYYY-MM-DD, got {v!r}")
        return v
