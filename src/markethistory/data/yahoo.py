"""Yahoo Finance chart endpoint client for monthly benchmark closes."""

from __future__ import annotations

import math
from typing import Any
from urllib.parse import quote

import requests

from markethistory.data.base import request_json
from markethistory.errors import DataProviderError


def range_for_months(months: int) -> str:
    if months <= 12:
        return "1y"
    if months <= 36:
        return "3y"
    return "5y"


class YahooChartClient:
    """Fetch monthly closes from Yahoo's v8 chart API."""

    def __init__(
        self,
        base_url: str = "https://query1.finance.yahoo.com",
        timeout: int = 15,
        max_retries: int = 1,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()

    def fetch_monthly_closes(self, symbol: str, months: int) -> list[float]:
        """Return up to the last `months` finite monthly closes, oldest first."""
        payload = request_json(
            self.session,
            f"{self.base_url}/v8/finance/chart/{quote(symbol, safe='')}",
            provider="Yahoo Finance",
            params={"interval": "1mo", "range": range_for_months(months)},
            headers={"cache-control": "no-store"},
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
        closes = [value for value in self._extract_closes(payload) if _is_finite(value)]
        take = min(len(closes), max(months, 0))
        if take == 0:
            return []
        return [float(value) for value in closes[-take:]]

    @staticmethod
    def _extract_closes(payload: Any) -> list[Any]:
        if not isinstance(payload, dict):
            raise DataProviderError("Yahoo Finance returned a malformed body")
        results = (payload.get("chart") or {}).get("result") or []
        if not results:
            return []
        indicators = results[0].get("indicators") or {}
        adjclose = _first(indicators.get("adjclose")).get("adjclose") or []
        if adjclose:
            return list(adjclose)
        return list(_first(indicators.get("quote")).get("close") or [])


def _first(items: Any) -> dict:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
