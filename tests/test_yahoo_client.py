from __future__ import annotations

import math
from typing import Any

import pytest

from markethistory.data.yahoo import YahooChartClient, range_for_months
from markethistory.errors import DataProviderError


class FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self) -> Any:
        return self._payload


class FakeSession:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        return FakeResponse(self.payload, self.status_code)


def _chart(adjclose: list[Any] | None, close: list[Any] | None) -> dict[str, Any]:
    indicators: dict[str, Any] = {"quote": [{"close": close}]}
    if adjclose is not None:
        indicators["adjclose"] = [{"adjclose": adjclose}]
    return {"chart": {"result": [{"indicators": indicators}]}}


def test_range_selection_by_month_count() -> None:
    assert range_for_months(6) == "1y"
    assert range_for_months(12) == "1y"
    assert range_for_months(24) == "3y"
    assert range_for_months(36) == "3y"
    assert range_for_months(60) == "5y"


def test_prefers_adjusted_closes_and_drops_non_finite_values() -> None:
    session = FakeSession(_chart([10.0, None, 11.0, math.nan, 12.0], [1.0, 2.0]))
    client = YahooChartClient(session=session)

    closes = client.fetch_monthly_closes("^GSPC", 12)

    assert closes == [10.0, 11.0, 12.0]
    assert session.calls[0]["url"].endswith("/v8/finance/chart/%5EGSPC")
    assert session.calls[0]["params"] == {"interval": "1mo", "range": "1y"}


def test_falls_back_to_quote_close_and_keeps_trailing_months() -> None:
    session = FakeSession(_chart([], [1.0, 2.0, 3.0, 4.0]))
    client = YahooChartClient(session=session)

    assert client.fetch_monthly_closes("URTH", 2) == [3.0, 4.0]


def test_empty_result_returns_no_closes() -> None:
    client = YahooChartClient(session=FakeSession({"chart": {"result": None}}))

    assert client.fetch_monthly_closes("GC=F", 12) == []


def test_http_failure_raises_provider_error() -> None:
    client = YahooChartClient(session=FakeSession({}, status_code=404))

    with pytest.raises(DataProviderError, match="404"):
        client.fetch_monthly_closes("NOPE", 12)
