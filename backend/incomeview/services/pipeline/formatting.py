"""
formatting.py — Display formatting for income statement cells.

Currency amounts are shown in billions with three decimals:

    format_magnitude(383285000000) -> "383.285 B"
    format_magnitude(None)         -> "N/A"

Both formatters are total: they never raise, whatever they are given.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

BILLION = 1_000_000_000
NOT_AVAILABLE = "N/A"
THOUSANDTH = Decimal("0.001")
# wide enough for every finite float at three decimals
_QUANTIZE_CONTEXT = Context(prec=400)


def format_magnitude(value: Any) -> str:
    """Format a currency amount in billions ("1.000 B"); "N/A" when missing."""
    if value is None or isinstance(value, bool):
        return NOT_AVAILABLE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NOT_AVAILABLE
    if math.isnan(number) or math.isinf(number):
        return NOT_AVAILABLE
    # Ties round away from zero on the exact binary value
    billions = Decimal(number / BILLION).quantize(THOUSANDTH, rounding=ROUND_HALF_UP, context=_QUANTIZE_CONTEXT)
    return f"{billions} B"


def format_verbatim(value: Any) -> str:
    """Render a value as-is (date, EPS). Missing values render as an empty cell."""
    if value is None:
        return ""
    return str(value)
