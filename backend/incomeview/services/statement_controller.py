"""
statement_controller.py — State container for the income statement table.

Purpose:
- Own the fetched dataset, the filter / sort criteria, the filter panel
  toggle and the request status.
- Apply user input (filter bounds, header clicks, panel toggle) and re-derive
  the filtered and sorted views after each change.
- Build the TableView consumed by the API layer and the CLI.

Request lifecycle:

    idle -> loading -> ready | failed

The dataset is fetched once; failed stays failed until the fetch is started
again (reconfigure() or a new controller). Each fetch gets a generation
number and a result is only applied if its generation is still the latest,
so a slow response can never overwrite a newer one.

This module does NOT:
- Talk HTTP directly (delegates to incomeview.data.fmp_client).
- Know about FastAPI or argparse.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple

from incomeview.core.config import Settings
from incomeview.core.logging import get_logger
from incomeview.data.fmp_client import DEFAULT_TIMEOUT_SECONDS, FetchError, fetch_income_statement
from incomeview.models.financial_record import FinancialRecord
from incomeview.services.pipeline.criteria import FilterCriteria, SortCriteria
from incomeview.services.pipeline.filtering import filter_records
from incomeview.services.pipeline.sorting import sort_records
from incomeview.services.pipeline.table import TableView, build_table_view

logger = get_logger(__name__)

# (base_url, api_key, symbol) -> records; raises FetchError on failure
Fetcher = Callable[[str, str, str], Sequence[FinancialRecord]]


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class DerivedViews:
    filtered: Tuple[FinancialRecord, ...] = ()
    sorted: Tuple[FinancialRecord, ...] = ()


def derive_views(
    records: Sequence[FinancialRecord],
    filters: FilterCriteria,
    sort: SortCriteria,
) -> DerivedViews:
    """Run the filter and sort stages over the raw dataset."""
    filtered = tuple(filter_records(records, filters))
    return DerivedViews(filtered=filtered, sorted=tuple(sort_records(filtered, sort)))


class StatementController:
    """
    Single owner of the table state.

    State transitions are serialised with a lock because the API serves sync
    endpoints from a thread pool; the network call runs outside the lock.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        symbol: str = "AAPL",
        fetcher: Optional[Fetcher] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.symbol = symbol
        self.timeout = timeout
        self._fetcher = fetcher or self._fetch_from_fmp

        self._lock = threading.Lock()
        self._generation = 0

        self.status = FetchStatus.IDLE
        self.records: Tuple[FinancialRecord, ...] = ()
        self.error: Optional[str] = None
        self.filters = FilterCriteria()
        self.sort = SortCriteria()
        self.filters_visible = False
        self.views = DerivedViews()

    @classmethod
    def from_settings(cls, settings: Settings, fetcher: Optional[Fetcher] = None) -> "StatementController":
        return cls(
            base_url=settings.FMP_API_URL,
            api_key=settings.FMP_API_KEY,
            symbol=settings.FMP_SYMBOL,
            fetcher=fetcher,
            timeout=settings.FMP_REQUEST_TIMEOUT_SECONDS,
        )

    def _fetch_from_fmp(self, base_url: str, api_key: str, symbol: str) -> Sequence[FinancialRecord]:
        return fetch_income_statement(base_url, api_key, symbol, timeout=self.timeout)

    @property
    def generation(self) -> int:
        return self._generation

    # -------------------------------------------------------------------------
    # Fetch lifecycle
    # -------------------------------------------------------------------------

    def _begin_fetch_locked(self) -> Tuple[int, str, str, str]:
        self._generation += 1
        self.status = FetchStatus.LOADING
        self.records = ()
        self.error = None
        self._refresh_views()
        return self._generation, self.base_url, self.api_key, self.symbol

    def begin_fetch(self) -> int:
        """Enter the loading state and return the new fetch generation."""
        with self._lock:
            generation, _, _, _ = self._begin_fetch_locked()
        return generation

    def complete_fetch(self, generation: int, records: Sequence[FinancialRecord]) -> bool:
        """Store a fetched dataset. Returns False if the result was stale and dropped."""
        with self._lock:
            if generation != self._generation:
                logger.info(
                    f"Discarding income statements from fetch #{generation} "
                    f"(latest is #{self._generation})"
                )
                return False
            self.records = tuple(records)
            self.error = None
            self.status = FetchStatus.READY
            self._refresh_views()
        logger.info(f"Loaded {len(self.records)} income statement(s) for {self.symbol}")
        return True

    def fail_fetch(self, generation: int, message: str) -> bool:
        """Record a fetch failure. Returns False if the failure was stale and dropped."""
        with self._lock:
            if generation != self._generation:
                logger.info(
                    f"Discarding failure of fetch #{generation} (latest is #{self._generation})"
                )
                return False
            self.records = ()
            self.error = message
            self.status = FetchStatus.FAILED
            self._refresh_views()
        logger.error(f"Income statement fetch failed: {message}")
        return True

    def load(self, only_if_idle: bool = False) -> FetchStatus:
        """
        Fetch the dataset once.

        Args:
            only_if_idle: Do nothing unless no fetch has been started yet

        Returns:
            The status after the fetch (loading if a newer fetch superseded this one)
        """
        with self._lock:
            if only_if_idle and self.status != FetchStatus.IDLE:
                return self.status
            generation, base_url, api_key, symbol = self._begin_fetch_locked()

        try:
            records = self._fetcher(base_url, api_key, symbol)
        except FetchError as e:
            self.fail_fetch(generation, e.message)
        else:
            self.complete_fetch(generation, records)
        return self.status

    def ensure_loaded(self) -> FetchStatus:
        return self.load(only_if_idle=True)

    def reconfigure(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        symbol: Optional[str] = None,
    ) -> FetchStatus:
        """Change the endpoint / key / symbol and fetch again under a new generation."""
        with self._lock:
            if base_url is not None:
                self.base_url = base_url
            if api_key is not None:
                self.api_key = api_key
            if symbol is not None:
                self.symbol = symbol.strip().upper()
        return self.load()

    # -------------------------------------------------------------------------
    # User input
    # -------------------------------------------------------------------------

    def toggle_filters(self) -> bool:
        with self._lock:
            self.filters_visible = not self.filters_visible
            return self.filters_visible

    def set_filter(self, name: str, raw: Any) -> FilterCriteria:
        """
        Set one filter bound from a control value.

        Raises:
            InvalidFilterValue: The value was rejected; criteria are unchanged
        """
        with self._lock:
            self.filters = self.filters.with_bound(name, raw)
            self._refresh_views()
            return self.filters

    def set_filters(self, filters: FilterCriteria) -> None:
        with self._lock:
            self.filters = filters
            self._refresh_views()

    def click_header(self, key: str) -> SortCriteria:
        with self._lock:
            self.sort = self.sort.toggled(key)
            self._refresh_views(refilter=False)
            return self.sort

    def set_sort(self, sort: SortCriteria) -> None:
        with self._lock:
            self.sort = sort
            self._refresh_views(refilter=False)

    def reset_criteria(self) -> None:
        with self._lock:
            self.filters = FilterCriteria()
            self.sort = SortCriteria()
            self._refresh_views()

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def _refresh_views(self, refilter: bool = True) -> None:
        if refilter:
            self.views = derive_views(self.records, self.filters, self.sort)
        else:
            self.views = DerivedViews(
                filtered=self.views.filtered,
                sorted=tuple(sort_records(self.views.filtered, self.sort)),
            )

    def table_view(self) -> TableView:
        with self._lock:
            return build_table_view(
                status=self.status.value,
                symbol=self.symbol,
                records=self.views.sorted,
                error=self.error,
                filters_visible=self.filters_visible,
                filters=self.filters,
                sort=self.sort,
            )
