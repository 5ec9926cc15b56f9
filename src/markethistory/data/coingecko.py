"""CoinGecko client for crypto history and current prices."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

import requests

from markethistory.data.base import cutoff_for, request_json, utc_now
from markethistory.data.symbols import resolve_symbol
from markethistory.domain.models import AssetClass, HistoricalDataPoint, MarketPrice, with_change
from markethistory.errors import DataProviderError

MAX_HISTORY_DAYS = 365


class CoinGeckoClient:
    """Fetch daily crypto prices from CoinGecko's public API."""

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        vs_currency: str = "eur",
        timeout: int = 15,
        max_retries: int = 1,
        session: requests.Session | None = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.vs_currency = vs_currency
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self._now = now
        self.logger = logging.getLogger("markethistory.data.coingecko")

    def fetch_history(
        self, provider_id: str, days: int, label: str
    ) -> list[HistoricalDataPoint]:
        """Return daily points inside the last `days` days, oldest first."""
        payload = request_json(
            self.session,
            f"{self.base_url}/coins/{provider_id}/market_chart",
            provider="CoinGecko",
            params={
                "vs_currency": self.vs_currency,
                "days": str(min(days, MAX_HISTORY_DAYS)),
                "interval": "daily",
            },
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
        prices = payload.get("prices") if isinstance(payload, dict) else None
        if not isinstance(prices, list):
            raise DataProviderError(f"CoinGecko response missing prices for {provider_id}")

        cutoff = cutoff_for(days, self._now())
        points: list[HistoricalDataPoint] = []
        for row in prices:
            if not isinstance(row, (list, tuple)) or len(row) < 2:
                continue
            try:
                moment = datetime.fromtimestamp(float(row[0]) / 1000.0, tz=UTC)
                price = float(row[1])
            except (TypeError, ValueError, OverflowError, OSError):
                continue
            if moment < cutoff:
                continue
            points.append(
                HistoricalDataPoint(
                    timestamp=moment.isoformat(),
                    value=price,
                    price=price,
                    label=label,
                )
            )
        return with_change(points)

    def fetch_price(self, symbol: str) -> MarketPrice | None:
        """Return the current price, preferring the configured currency over USD."""
        coin_id = resolve_symbol(symbol, AssetClass.CRYPTO)
        try:
            payload = request_json(
                self.session,
                f"{self.base_url}/simple/price",
                provider="CoinGecko",
                params={
                    "ids": coin_id,
                    "vs_currencies": f"{self.vs_currency},usd",
                    "include_24hr_change": "true",
                },
                timeout=self.timeout,
                max_retries=self.max_retries,
            )
        except DataProviderError as exc:
            self.logger.error("Error fetching crypto price for %s: %s", symbol, exc)
            return None

        coin = payload.get(coin_id) if isinstance(payload, dict) else None
        if not isinstance(coin, dict):
            return None
        price = coin.get(self.vs_currency) or coin.get("usd")
        if not price:
            return None
        change = (
            coin.get(f"{self.vs_currency}_24h_change") or coin.get("usd_24h_change") or 0.0
        )
        return MarketPrice(
            symbol=symbol.strip().upper(),
            price=float(price),
            change_24h=float(change),
            last_update=self._now().isoformat(),
        )
