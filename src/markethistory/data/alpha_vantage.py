"""Alpha Vantage HTTP client for historical daily equity data."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

import pandas as pd
import requests

from markethistory.data.base import cutoff_for, request_json, utc_now
from markethistory.domain.models import HistoricalDataPoint, with_change
from markethistory.errors import DataProviderError

TIME_SERIES_KEY = "Time Series (Daily)"
COMPACT_MAX_DAYS = 30


class AlphaVantageClient:
    """Minimal Alpha Vantage client for daily closes and volumes."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.alphavantage.co/query",
        timeout: int = 15,
        max_retries: int = 1,
        session: requests.Session | None = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self._now = now
        self.logger = logging.getLogger("markethistory.data.alpha_vantage")

    @property
    def configured(self) -> bool:
        return bool(self.api_key.strip())

    def fetch_history(
        self, provider_id: str, days: int, label: str
    ) -> list[HistoricalDataPoint]:
        """Fetch daily bars within the last `days` days as normalized points."""
        if not self.configured:
            raise DataProviderError("Alpha Vantage API key is not configured.")
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": provider_id.upper(),
            "outputsize": "full" if days > COMPACT_MAX_DAYS else "compact",
            "apikey": self.api_key,
        }
        payload = request_json(
            self.session,
            self.base_url,
            provider="Alpha Vantage",
            params=params,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )
        if not isinstance(payload, dict):
            raise DataProviderError("Alpha Vantage returned a malformed body")
        if "Note" in payload or "Information" in payload:
            raise DataProviderError("Alpha Vantage rate limit reached. Try again in a minute.")
        if "Error Message" in payload:
            raise DataProviderError(
                f"Alpha Vantage returned an error: {payload['Error Message']}"
            )
        series = payload.get(TIME_SERIES_KEY)
        if not series:
            raise DataProviderError(
                f"Alpha Vantage response missing daily time series for symbol {provider_id}."
            )

        frame = self._series_to_frame(series)
        cutoff = pd.Timestamp(cutoff_for(days, self._now()))
        frame = frame[frame.index >= cutoff]

        points: list[HistoricalDataPoint] = []
        for moment, row in frame.iterrows():
            price = float(row["close"])
            volume = row["volume"]
            points.append(
                HistoricalDataPoint(
                    timestamp=moment.isoformat(),
                    value=price,
                    price=price,
                    label=label,
                    volume=float(volume) if pd.notna(volume) and volume else None,
                )
            )
        return with_change(points)

    @staticmethod
    def _series_to_frame(series: dict) -> pd.DataFrame:
        frame = pd.DataFrame.from_dict(series, orient="index")
        if "4. close" not in frame.columns:
            raise DataProviderError("Alpha Vantage daily series missing close prices")
        frame.index = pd.to_datetime(frame.index, utc=True, errors="coerce")
        frame = frame[frame.index.notna()].sort_index()
        normalized = pd.DataFrame(index=frame.index)
        normalized["close"] = pd.to_numeric(frame["4. close"], errors="coerce")
        if "5. volume" in frame.columns:
            normalized["volume"] = pd.to_numeric(frame["5. volume"], errors="coerce")
        else:
            normalized["volume"] = float("nan")
        return normalized.dropna(subset=["close"])
