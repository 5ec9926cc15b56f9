"""Benchmark index series: server-side aggregation first, direct Yahoo second."""

from __future__ import annotations

import logging
from typing import Any

import requests

from markethistory.config import Settings
from markethistory.data.base import request_json
from markethistory.data.symbols import resolve_benchmark_targets
from markethistory.data.yahoo import YahooChartClient
from markethistory.domain.models import BenchmarkResult, BenchmarkSeries, BenchmarkSource
from markethistory.errors import DataProviderError
from markethistory.state.store import NoopSnapshotStore, SnapshotStore

logger = logging.getLogger("markethistory.benchmark")

UNAVAILABLE_MESSAGE = "Benchmark unavailable. Retry later or choose another index."


def rebase(values: list[float]) -> list[float]:
    """Scale a series so its first value is 100.

    Leading zero closes are dropped first; a series of only zeros has no
    base and rebases to an empty list.
    """
    start = next((index for index, value in enumerate(values) if value), len(values))
    trimmed = values[start:]
    if not trimmed:
        return []
    base = trimmed[0]
    return [value / base * 100 for value in trimmed]


def fit_to_months(values: list[float], months: int) -> list[float]:
    """Pad with the last value up to `months` entries, or keep the trailing `months`."""
    if months <= 0 or not values:
        return []
    missing = months - len(values)
    if missing > 0:
        return [*values, *([values[-1]] * missing)]
    return values[-months:]


def aggregate_benchmarks(
    ids: list[str],
    months: int,
    custom_symbols: list[str] | None,
    yahoo: YahooChartClient,
) -> list[BenchmarkSeries]:
    """Fetch, rebase and fit each requested benchmark; failed targets are skipped."""
    series: list[BenchmarkSeries] = []
    for target in resolve_benchmark_targets(ids, custom_symbols):
        try:
            closes = yahoo.fetch_monthly_closes(target.symbol, months)
        except DataProviderError as exc:
            logger.warning("Benchmark %s (%s) unavailable: %s", target.id, target.symbol, exc)
            continue
        data = fit_to_months(rebase(closes), months)
        if data:
            series.append(BenchmarkSeries(id=target.id, label=target.label, data=data))
    return series


class BenchmarkServiceClient:
    """Client for the hosted benchmark aggregation function."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: int = 15,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def invoke(
        self, ids: list[str], months: int, custom_symbols: list[str]
    ) -> list[BenchmarkSeries]:
        headers = {"content-type": "application/json"}
        if self.api_key:
            headers["authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        payload = request_json(
            self.session,
            self.url,
            provider="Benchmark service",
            method="POST",
            json_body={"ids": ids, "months": months, "customSymbols": custom_symbols},
            headers=headers,
            timeout=self.timeout,
        )
        if not isinstance(payload, dict):
            raise DataProviderError("Benchmark service returned a malformed body")
        raw_series = payload.get("series") or []
        if not raw_series and payload.get("error"):
            raise DataProviderError(f"Benchmark service error: {payload['error']}")
        return [
            BenchmarkSeries.from_record(record)
            for record in raw_series
            if isinstance(record, dict)
        ]


class BenchmarkLoader:
    """Load rebased benchmark series, keeping the last good result as a snapshot."""

    def __init__(
        self,
        yahoo: YahooChartClient,
        service: BenchmarkServiceClient | None = None,
        store: SnapshotStore | None = None,
    ) -> None:
        self.yahoo = yahoo
        self.service = service
        self.store: SnapshotStore = store or NoopSnapshotStore()

    @classmethod
    def from_settings(cls, settings: Settings, store: SnapshotStore | None = None) -> BenchmarkLoader:
        service = None
        if settings.benchmark_service_url:
            service = BenchmarkServiceClient(
                url=settings.benchmark_service_url,
                api_key=settings.benchmark_service_key,
                timeout=settings.http_timeout_seconds,
            )
        yahoo = YahooChartClient(
            base_url=settings.yahoo_chart_base_url,
            timeout=settings.http_timeout_seconds,
        )
        return cls(yahoo=yahoo, service=service, store=store)

    def load(
        self,
        ids: list[str],
        months: int,
        custom_symbols: list[str] | None = None,
    ) -> BenchmarkResult:
        """Never raises; failures end up in `BenchmarkResult.error`."""
        customs = list(custom_symbols or [])
        name = f"benchmarks:{','.join(ids)}:{months}:{','.join(customs)}"
        error: str | None = None
        try:
            series: list[BenchmarkSeries] = []
            source: BenchmarkSource = "none"
            if self.service is not None:
                try:
                    series = self.service.invoke(ids, months, customs)
                except DataProviderError as exc:
                    logger.warning("Benchmark service failed: %s", exc)
                    error = str(exc) or "Benchmark service invocation failed"
                if series:
                    source = "service"
                    logger.info(
                        "Benchmark service series loaded: %s",
                        ", ".join(f"{item.id}={len(item.data)}" for item in series),
                    )

            if not series:
                logger.info("Falling back to direct Yahoo benchmark fetch")
                series = aggregate_benchmarks(ids, months, customs, self.yahoo)
                if series:
                    source = "direct"

            if series:
                self.store.save(name, [item.to_record() for item in series])
                return BenchmarkResult(series=series, error=error, source=source)
            logger.warning("No benchmark data available after fallback")
        except Exception as exc:
            logger.exception("Unexpected error loading benchmarks")
            error = error or str(exc) or "Unknown error loading benchmarks"

        return self._from_snapshot(name, error or UNAVAILABLE_MESSAGE)

    def _from_snapshot(self, name: str, error: str) -> BenchmarkResult:
        snapshot: Any = self.store.load(name)
        if isinstance(snapshot, list) and snapshot:
            series = [
                BenchmarkSeries.from_record(record)
                for record in snapshot
                if isinstance(record, dict)
            ]
            return BenchmarkResult(series=series, error=error, source="snapshot")
        return BenchmarkResult(series=[], error=error, source="none")
