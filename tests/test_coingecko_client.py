from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
import requests

from markethistory.data.coingecko import CoinGeckoClient
from markethistory.errors import DataProviderError

NOW = datetime(2025, 3, 31, 12, 0, tzinfo=UTC)


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = "" if payload is None else str(payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | Exception) -> None:
        self.response = response
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _ms(moment: datetime) -> float:
    return moment.timestamp() * 1000


def test_fetch_history_filters_by_cutoff_and_computes_change() -> None:
    prices = [
        [_ms(NOW - timedelta(days=12)), 90.0],
        [_ms(NOW - timedelta(days=10)), 100.0],
        [_ms(NOW - timedelta(days=5)), 110.0],
        [_ms(NOW), 121.0],
    ]
    session = FakeSession(FakeResponse(200, {"prices": prices}))
    client = CoinGeckoClient(session=session, now=lambda: NOW)

    points = client.fetch_history("bitcoin", 10, "BTC")

    assert [point.price for point in points] == [100.0, 110.0, 121.0]
    assert points[0].change == 0.0
    assert points[1].change == pytest.approx(10.0)
    assert points[2].change == pytest.approx(10.0)
    assert all(point.label == "BTC" for point in points)
    assert points[-1].timestamp == NOW.isoformat()
    assert session.calls[0]["url"].endswith("/coins/bitcoin/market_chart")
    assert session.calls[0]["params"] == {
        "vs_currency": "eur",
        "days": "10",
        "interval": "daily",
    }


def test_fetch_history_caps_requested_days_at_provider_maximum() -> None:
    session = FakeSession(FakeResponse(200, {"prices": []}))
    client = CoinGeckoClient(session=session, now=lambda: NOW)

    assert client.fetch_history("bitcoin", 730, "BTC") == []
    assert session.calls[0]["params"]["days"] == "365"


def test_fetch_history_raises_on_missing_prices() -> None:
    client = CoinGeckoClient(session=FakeSession(FakeResponse(200, {})), now=lambda: NOW)

    with pytest.raises(DataProviderError, match="missing prices"):
        client.fetch_history("bitcoin", 30, "BTC")


def test_fetch_history_raises_on_http_error() -> None:
    client = CoinGeckoClient(
        session=FakeSession(FakeResponse(404, {"error": "coin not found"})), now=lambda: NOW
    )

    with pytest.raises(DataProviderError, match="404"):
        client.fetch_history("unknownx", 30, "UNKNOWNX")


def test_fetch_history_raises_on_network_error() -> None:
    client = CoinGeckoClient(
        session=FakeSession(requests.ConnectionError("offline")), now=lambda: NOW
    )

    with pytest.raises(DataProviderError, match="offline"):
        client.fetch_history("bitcoin", 30, "BTC")


def test_fetch_price_prefers_eur_and_reads_change() -> None:
    payload = {"bitcoin": {"eur": 60000.0, "usd": 65000.0, "eur_24h_change": -1.5}}
    session = FakeSession(FakeResponse(200, payload))
    client = CoinGeckoClient(session=session, now=lambda: NOW)

    price = client.fetch_price("btc")

    assert price is not None
    assert price.symbol == "BTC"
    assert price.price == 60000.0
    assert price.change_24h == -1.5
    assert session.calls[0]["params"]["ids"] == "bitcoin"


def test_fetch_price_falls_back_to_usd() -> None:
    payload = {"solana": {"usd": 150.0}}
    client = CoinGeckoClient(session=FakeSession(FakeResponse(200, payload)), now=lambda: NOW)

    price = client.fetch_price("SOL")

    assert price is not None
    assert price.price == 150.0


def test_fetch_price_returns_none_when_unavailable() -> None:
    missing = CoinGeckoClient(session=FakeSession(FakeResponse(200, {})), now=lambda: NOW)
    failing = CoinGeckoClient(session=FakeSession(FakeResponse(503)), now=lambda: NOW)

    assert missing.fetch_price("UNKNOWNX") is None
    assert failing.fetch_price("BTC") is None


def test_fetch_history_skips_out_of_range_timestamps() -> None:
    good = _ms(NOW - timedelta(days=1))
    session = FakeSession(FakeResponse(200, {"prices": [[1e30, 1.0], [good, 2.0]]}))
    client = CoinGeckoClient(session=session, now=lambda: NOW)

    points = client.fetch_history("bitcoin", 7, "BTC")

    assert [point.price for point in points] == [2.0]
