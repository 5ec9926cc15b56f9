"""Yahoo Finance current-price lookup for stocks and ETFs."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

import pandas as pd

from markethistory.data.base import utc_now
from markethistory.domain.models import MarketPrice


class YFinancePriceLookup:
    """Latest daily close via yfinance, used to seed synthetic equity history."""

    def __init__(self, period: str = "5d", now: Callable[[], datetime] = utc_now) -> None:
        self.period = period
        self._now = now
        self.logger = logging.getLogger("markethistory.data.yfinance")

    def fetch_price(self, symbol: str) -> MarketPrice | None:
        import yfinance as yf

        ticker = symbol.strip().upper()
        try:
            history = yf.Ticker(ticker).history(
                period=self.period,
                interval="1d",
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            self.logger.error("yfinance request failed for %s: %s", ticker, exc)
            return None

        closes = self._closes(history)
        if closes.empty:
            self.logger.warning("yfinance returned no closes for %s", ticker)
            return None
        last = float(closes.iloc[-1])
        change = 0.0
        if len(closes) > 1 and closes.iloc[-2]:
            change = (last - float(closes.iloc[-2])) / float(closes.iloc[-2]) * 100
        return MarketPrice(
            symbol=ticker,
            price=last,
            change_24h=change,
            last_update=self._now().isoformat(),
        )

    @staticmethod
    def _closes(history: Any) -> pd.Series:
        if history is None:
            return pd.Series(dtype=float)
        frame = pd.DataFrame(history)
        if frame.empty:
            return pd.Series(dtype=float)
        column = next(
            (name for name in frame.columns if str(name).strip().lower() == "close"),
            None,
        )
        if column is None:
            return pd.Series(dtype=float)
        closes = pd.to_numeric(frame[column], errors="coerce").dropna()
        return closes[closes > 0]
