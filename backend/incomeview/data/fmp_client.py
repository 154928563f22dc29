"""
fmp_client.py — Financial Modeling Prep (FMP) income statement fetcher.

Issues exactly one GET per call:

    {base_url}{symbol}?period=annual&apikey={api_key}

and returns the body as a tuple of FinancialRecord (server order). Any
failure (network error, timeout, non-2xx status, or a body that is not a
JSON array of income statements) raises FetchError with a human-readable
message. There is no retry: the caller shows the error and stays failed.

The API key is never written to logs or error messages.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import requests
from pydantic import ValidationError

from incomeview.core.logging import get_logger
from incomeview.models.financial_record import FinancialRecord

logger = get_logger(__name__)

ANNUAL_PERIOD = "annual"
DEFAULT_TIMEOUT_SECONDS = 30.0
_REDACTED = "***"


class FetchError(Exception):
    """Raised when the income statement request fails or returns a malformed body."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


def build_income_statement_url(base_url: str, symbol: str) -> str:
    """
    Build the request URL (without query string).

    The base URL is used as a plain prefix, so it is expected to end with the
    endpoint path and a trailing slash, e.g.
    "https://financialmodelingprep.com/api/v3/income-statement/".
    """
    return f"{base_url}{symbol}"


def build_query_params(api_key: str) -> Dict[str, str]:
    return {"period": ANNUAL_PERIOD, "apikey": api_key}


def redact_url(url: str, api_key: str) -> str:
    """Replace the API key in a URL (or any message) before it is logged."""
    if not api_key:
        return url
    return url.replace(api_key, _REDACTED)


def _error_message_from_body(response: requests.Response) -> Optional[str]:
    """FMP reports most errors as {"Error Message": "..."}."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("Error Message") or body.get("message")
        if message:
            return str(message)
    return None


def _raise_for_status(response: requests.Response, url: str) -> None:
    status = response.status_code
    if 200 <= status < 300:
        return

    detail = _error_message_from_body(response)

    if status == 401:
        message = (
            "FMP API returned 401 Unauthorized. "
            "Your API key may be invalid or expired."
        )
    elif status == 403:
        message = (
            f"FMP API returned 403 Forbidden: {detail or 'Forbidden'}. "
            f"Please check your FMP account status and plan access."
        )
    elif status == 429:
        message = "FMP API rate limit exceeded. Please wait and try again later."
    else:
        reason = detail or response.reason or "request failed"
        message = f"FMP API returned HTTP {status}: {reason}"

    raise FetchError(message, status_code=status, url=url)


def parse_income_statements(payload: Any, url: Optional[str] = None) -> Tuple[FinancialRecord, ...]:
    """
    Validate a decoded response body into FinancialRecord objects.

    The body is accepted or rejected as a whole: one malformed element makes
    the entire dataset unavailable.

    Raises:
        FetchError: If the payload is not a list of income statement objects
    """
    if isinstance(payload, dict) and payload.get("Error Message"):
        raise FetchError(str(payload["Error Message"]), url=url)

    if not isinstance(payload, list):
        raise FetchError(
            f"FMP API returned unexpected data type for income statement: "
            f"{type(payload).__name__}. Expected a list.",
            url=url,
        )

    records = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise FetchError(
                f"Income statement #{index} is {type(item).__name__}, expected an object",
                url=url,
            )
        try:
            records.append(FinancialRecord.model_validate(item))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or "record"
            raise FetchError(
                f"Income statement #{index} is malformed ({field}: {first.get('msg')})",
                url=url,
            ) from e

    return tuple(records)


def fetch_income_statement(
    base_url: str,
    api_key: str,
    symbol: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    session: Optional[requests.Session] = None,
) -> Tuple[FinancialRecord, ...]:
    """
    Fetch annual income statements for a symbol.

    Args:
        base_url: Endpoint prefix the symbol is appended to
        api_key: FMP API key (sent as the apikey query parameter)
        symbol: Stock ticker symbol (e.g., "AAPL")
        timeout: Request timeout in seconds
        session: Optional requests session (defaults to a one-off request)

    Returns:
        Tuple of FinancialRecord in server order

    Raises:
        FetchError: On network failure, non-2xx status or malformed body
    """
    url = build_income_statement_url(base_url, symbol)
    params = build_query_params(api_key)
    safe_url = redact_url(url, api_key)

    if not base_url or not api_key:
        logger.warning(
            "FMP API URL or key is empty; the income statement request will likely fail"
        )

    logger.info(f"Fetching annual income statements for {symbol}")
    logger.debug(f"Making FMP API request: {safe_url}?period={ANNUAL_PERIOD}")

    http = session or requests
    try:
        response = http.get(url, params=params, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise FetchError(
            f"FMP API request timed out after {timeout:g}s", url=safe_url
        ) from e
    except requests.exceptions.RequestException as e:
        reason = redact_url(str(e), api_key)
        raise FetchError(f"Failed to fetch income statement: {reason}", url=safe_url) from e

    _raise_for_status(response, safe_url)

    try:
        payload = response.json()
    except ValueError as e:
        raise FetchError("FMP API returned a body that is not valid JSON", url=safe_url) from e

    records = parse_income_statements(payload, url=safe_url)

    if not records:
        logger.warning(f"FMP API returned empty list for {symbol} income statement")

    logger.info(f"Successfully fetched {len(records)} income statement(s) for {symbol}")
    return records
