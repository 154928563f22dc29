"""
income_statement.py — Income Statement Table API Endpoints

Purpose:
- Expose the controller's current TableView.
- Accept the table controls: filter bounds, header clicks, filter panel
  toggle, criteria reset.

Endpoints:
- GET  /income-statement                 → current table view
- POST /income-statement/filters         → set one filter bound
- POST /income-statement/filters/toggle  → show / hide the filter panel
- POST /income-statement/sort/{key}      → header click (date, revenue, netIncome)
- POST /income-statement/reset           → default filters and sort
- POST /income-statement/reconfigure     → new endpoint / key / symbol, fetch again

A failed fetch is part of the view (status "failed", message "Error: ..."),
not an HTTP error. Rejected filter values return 422.
"""

from __future__ import annotations

import threading
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from incomeview.core.config import get_settings
from incomeview.core.logging import get_logger
from incomeview.services.pipeline.criteria import InvalidFilterValue
from incomeview.services.pipeline.table import TableView
from incomeview.services.statement_controller import StatementController

logger = get_logger(__name__)

router = APIRouter(
    prefix="/income-statement",
    tags=["income-statement"]
)

# -----------------------------------------------------------------------------
# Controller dependency
# -----------------------------------------------------------------------------

_controller: Optional[StatementController] = None
_controller_lock = threading.Lock()


def get_controller() -> StatementController:
    """
    Process-wide controller; the first request triggers the single fetch.

    Tests override this dependency with a controller using a stub fetcher.
    """
    global _controller
    with _controller_lock:
        if _controller is None:
            _controller = StatementController.from_settings(get_settings())
    _controller.ensure_loaded()
    return _controller


# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------

class FilterUpdate(BaseModel):
    """A change to one filter control."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "revenueRange.min", "value": "300000000000"}
        }
    )

    name: str
    value: Optional[Union[str, float]] = None


class ReconfigureRequest(BaseModel):
    """New data source settings; omitted fields keep their current value."""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"symbol": "MSFT"}
        },
    )

    api_url: Optional[str] = Field(None, alias="apiUrl")
    api_key: Optional[str] = Field(None, alias="apiKey")
    symbol: Optional[str] = None


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@router.get("", response_model=TableView)
def get_income_statement(controller: StatementController = Depends(get_controller)):
    """
    GET /income-statement

    Returns the title, headers, formatted rows and the message shown
    instead of the table (loading / error / no data).
    """
    return controller.table_view()


@router.post("/filters", response_model=TableView)
def update_filter(update: FilterUpdate, controller: StatementController = Depends(get_controller)):
    """
    POST /income-statement/filters

    Body: {"name": "yearRange.start", "value": "2022"}. An empty value
    clears the bound (0 for min/start, unbounded for max/end).

    Raises:
        422: Unknown filter name or a value that is not a number / valid year
    """
    try:
        controller.set_filter(update.name, update.value)
    except InvalidFilterValue as e:
        logger.warning(f"Rejected filter update {update.name}={update.value!r}: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    return controller.table_view()


@router.post("/filters/toggle", response_model=TableView)
def toggle_filters(controller: StatementController = Depends(get_controller)):
    """POST /income-statement/filters/toggle"""
    controller.toggle_filters()
    return controller.table_view()


@router.post("/sort/{key}", response_model=TableView)
def click_header(key: str, controller: StatementController = Depends(get_controller)):
    """
    POST /income-statement/sort/{key}

    Same column while ascending → descending; otherwise the column
    ascending. Keys other than date / revenue / netIncome keep the
    current row order.
    """
    controller.click_header(key)
    return controller.table_view()


@router.post("/reset", response_model=TableView)
def reset_criteria(controller: StatementController = Depends(get_controller)):
    """POST /income-statement/reset"""
    controller.reset_criteria()
    return controller.table_view()


@router.post("/reconfigure", response_model=TableView)
def reconfigure(request: ReconfigureRequest, controller: StatementController = Depends(get_controller)):
    """
    POST /income-statement/reconfigure

    Body: {"apiUrl": "...", "apiKey": "...", "symbol": "MSFT"}, any subset.
    Starts a new fetch; a response still in flight for the old settings
    is discarded. Fetch failures are reported in the view.
    """
    logger.info(f"Reconfiguring data source (symbol={request.symbol or controller.symbol})")
    controller.reconfigure(
        base_url=request.api_url,
        api_key=request.api_key,
        symbol=request.symbol,
    )
    return controller.table_view()
