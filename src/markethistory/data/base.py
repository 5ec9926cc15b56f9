"""Provider contracts and the shared HTTP request helper."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from time import sleep
from typing import Any, Protocol

import requests

from markethistory.domain.models import HistoricalDataPoint, MarketPrice
from markethistory.errors import DataProviderError

logger = logging.getLogger("markethistory.data")


class HistoryProvider(Protocol):
    """Interface for historical series retrieval."""

    def fetch_history(
        self, provider_id: str, days: int, label: str
    ) -> list[HistoricalDataPoint]:
        """Return points in ascending time order, or raise DataProviderError."""


class PriceLookup(Protocol):
    """Interface for current price retrieval."""

    def fetch_price(self, symbol: str) -> MarketPrice | None:
        """Return the current price, or None when no data is available."""


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def cutoff_for(days: int, now: datetime) -> datetime:
    """Oldest instant kept when a window of `days` ends at `now`."""
    return now - timedelta(days=days)


def request_json(
    session: requests.Session,
    url: str,
    *,
    provider: str,
    params: Mapping[str, str] | None = None,
    json_body: Any = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = 15,
    max_retries: int = 1,
    method: str = "GET",
) -> Any:
    """Perform a request and decode its JSON body.

    Rate limits and 5xx responses are retried with linear backoff while
    attempts remain. Everything else that is not a 2xx JSON response raises
    DataProviderError.
    """
    attempts = max(1, max_retries)
    for attempt in range(1, attempts + 1):
        try:
            response = session.request(
                method,
                url,
                params=dict(params) if params else None,
                json=json_body,
                headers=dict(headers) if headers else None,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            if attempt == attempts:
                raise DataProviderError(f"{provider} request failed: {exc}") from exc
            logger.warning(
                "%s request failed (attempt %s/%s). Retrying.", provider, attempt, attempts
            )
            sleep(float(attempt))
            continue
        if response.status_code == 429 or response.status_code >= 500:
            if attempt == attempts:
                raise DataProviderError(f"{provider} returned HTTP {response.status_code}")
            logger.warning(
                "%s returned HTTP %s (attempt %s/%s). Retrying.",
                provider,
                response.status_code,
                attempt,
                attempts,
            )
            sleep(float(attempt))
            continue
        if response.status_code >= 400:
            detail = (response.text or "").strip() or "No response body"
            raise DataProviderError(f"{provider} error {response.status_code}: {detail[:200]}")
        try:
            return response.json()
        except ValueError as exc:
            raise DataProviderError(f"{provider} returned a malformed body") from exc
    raise DataProviderError(f"{provider} request exhausted retries")
