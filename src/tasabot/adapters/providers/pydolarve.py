"""
pydolarve API Provider for Venezuelan Dollar Rates

This module implements the client for the pydolarve rate-quotation API.
It performs a single GET, decodes the nested "monitors" mapping into a
RateQuote and maps every failure onto the RateFetchError hierarchy.

Expected response shape:
    {"monitors": {"bcv": {"price": 36.5, ...},
                  "enparalelovzla": {"price": "40.00", ...}, ...}}

Files that USE this module:
- tasabot.application.report_service (fetches quotes for each report)
- tests.test_providers (unit tests)

Files that this module USES:
- tasabot.adapters.providers.base (RateProvider interface)
- tasabot.domain (RateQuote, fetch errors)
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import requests

from tasabot.adapters.providers.base import RateProvider
from tasabot.domain.errors import ApiError, ApiUnreachable, InvalidRateData
from tasabot.domain.models import RateQuote, round2

log = logging.getLogger(__name__)

PRIMARY_MONITOR = "bcv"
SECONDARY_MONITOR = "enparalelovzla"

# Response bodies can be large HTML error pages
_BODY_EXCERPT = 500


def _to_decimal(monitor: str, raw: Any) -> Decimal:
    """
    Convert a monitor price to a finite Decimal.

    Raises:
        InvalidRateData: If the value is missing, boolean, not a finite number,
            or too large to render with 2 decimal places
    """
    if raw is None or isinstance(raw, bool):
        raise InvalidRateData(f"monitor '{monitor}' has no numeric price: {raw!r}")
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise InvalidRateData(f"monitor '{monitor}' price is not a number: {raw!r}") from e
    if not value.is_finite():
        raise InvalidRateData(f"monitor '{monitor}' price is not finite: {raw!r}")
    try:
        round2(value)
    except InvalidOperation as e:
        raise InvalidRateData(f"monitor '{monitor}' price is out of range: {raw!r}") from e
    return value


def _monitor_price(monitors: dict, monitor: str) -> Decimal:
    entry = monitors.get(monitor)
    if not isinstance(entry, dict):
        raise InvalidRateData(f"monitor '{monitor}' missing from response")
    return _to_decimal(monitor, entry.get("price"))


def decode_monitors(payload: Any, fetched_at: Optional[datetime] = None) -> RateQuote:
    """
    Decode a pydolarve JSON payload into a RateQuote.

    Args:
        payload: Parsed JSON document
        fetched_at: Timestamp to record (defaults to now, UTC)

    Returns:
        RateQuote with the BCV and parallel-market prices

    Raises:
        InvalidRateData: If the document shape or either price is invalid
    """
    if not isinstance(payload, dict):
        raise InvalidRateData(f"expected a JSON object, got {type(payload).__name__}")
    monitors = payload.get("monitors")
    if not isinstance(monitors, dict):
        raise InvalidRateData("response missing 'monitors' mapping")

    return RateQuote(
        primary_rate=_monitor_price(monitors, PRIMARY_MONITOR),
        secondary_rate=_monitor_price(monitors, SECONDARY_MONITOR),
        fetched_at=fetched_at or datetime.now(timezone.utc),
    )


class PyDolarVeProvider(RateProvider):
    def __init__(self, url: str, timeout: int = 10, session: Optional[requests.Session] = None):
        """
        Initialize the pydolarve provider.

        Args:
            url: Full endpoint URL returning the monitors document
            timeout: HTTP timeout in seconds (default: 10)
            session: Optional requests session (defaults to module-level requests)

        Raises:
            ValueError: If url is empty
        """
        if not url:
            raise ValueError("pydolarve API URL not configured")
        self.url = url
        self.timeout = timeout
        self.session = session

    def _get(self) -> requests.Response:
        http = self.session or requests
        return http.get(self.url, timeout=self.timeout, headers={"Accept": "application/json"})

    def fetch_quote(self) -> RateQuote:
        """
        Fetch and decode the current quote.

        Returns:
            RateQuote with both monitor prices

        Raises:
            ApiUnreachable: On timeout or network/connection error
            ApiError: On a non-2xx response
            InvalidRateData: On invalid JSON or missing/non-numeric prices
        """
        try:
            log.info("Fetching dollar rates from pydolarve")
            resp = self._get()
        except requests.exceptions.Timeout as e:
            log.warning("pydolarve API timeout after %d seconds", self.timeout)
            raise ApiUnreachable(f"pydolarve API timeout after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            log.warning("pydolarve API request failed (network/connection error): %s", e)
            raise ApiUnreachable(f"pydolarve API request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            body = (resp.text or "")[:_BODY_EXCERPT]
            log.error("pydolarve API HTTP error: status=%d body=%s", resp.status_code, body)
            raise ApiError(resp.status_code, body)

        try:
            data = resp.json()
        except ValueError as e:
            log.error("pydolarve API returned invalid JSON: %s", e)
            raise InvalidRateData(f"pydolarve API returned invalid JSON: {e}") from e

        try:
            quote = decode_monitors(data)
        except InvalidRateData as e:
            log.warning("pydolarve API returned unusable rates: %s", e)
            raise

        log.info(
            "pydolarve rates: BCV=%s, Paralelo=%s",
            quote.primary_rate,
            quote.secondary_rate,
        )
        return quote
