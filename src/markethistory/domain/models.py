"""Core market history domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Literal

BenchmarkSource = Literal["service", "direct", "snapshot", "none"]


class AssetClass(StrEnum):
    """Asset classes with their own history source."""

    CRYPTO = "crypto"
    STOCK = "stock"
    ETF = "etf"


class Timeframe(StrEnum):
    """Symbolic chart ranges."""

    ONE_DAY = "1D"
    ONE_WEEK = "1W"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    ONE_YEAR = "1Y"
    ALL = "ALL"


TIMEFRAME_DAYS: dict[str, int] = {
    Timeframe.ONE_DAY: 1,
    Timeframe.ONE_WEEK: 7,
    Timeframe.ONE_MONTH: 30,
    Timeframe.THREE_MONTHS: 90,
    Timeframe.SIX_MONTHS: 180,
    Timeframe.ONE_YEAR: 365,
    Timeframe.ALL: 730,
}

DEFAULT_TIMEFRAME_DAYS = 30


def timeframe_to_days(timeframe: str) -> int:
    """Return the fixed day count for a timeframe, 30 for unknown values."""
    return TIMEFRAME_DAYS.get(str(timeframe).strip().upper(), DEFAULT_TIMEFRAME_DAYS)


@dataclass(frozen=True)
class HistoricalDataPoint:
    """One sample of an asset's value over time."""

    timestamp: str
    value: float
    price: float
    change: float = 0.0
    label: str = ""
    volume: float | None = None
    synthetic: bool = False

    def to_record(self) -> dict[str, Any]:
        """Convert point to serializable dict."""
        record: dict[str, Any] = {
            "timestamp": self.timestamp,
            "value": self.value,
            "price": self.price,
            "change": self.change,
            "label": self.label,
            "synthetic": self.synthetic,
        }
        if self.volume is not None:
            record["volume"] = self.volume
        return record


@dataclass(frozen=True)
class CacheEntry:
    """Cached series with its store time and time-to-live, both in milliseconds."""

    data: list[HistoricalDataPoint]
    timestamp_ms: int
    ttl_ms: int

    def is_valid(self, now_ms: int) -> bool:
        return now_ms - self.timestamp_ms < self.ttl_ms


@dataclass(frozen=True)
class MarketPrice:
    """Current price returned by a price lookup."""

    symbol: str
    price: float
    change_24h: float = 0.0
    last_update: str = field(default_factory=lambda: datetime.now(tz=UTC).isoformat())


@dataclass(frozen=True)
class BenchmarkSeries:
    """Rebased monthly series for one benchmark."""

    id: str
    label: str
    data: list[float] = field(default_factory=list)

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "data": list(self.data)}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> BenchmarkSeries:
        raw = record.get("data") or []
        return cls(
            id=str(record.get("id", "")),
            label=str(record.get("label", "")),
            data=[float(value) for value in raw],
        )


@dataclass(frozen=True)
class BenchmarkTarget:
    """Benchmark id resolved to the provider symbol to chart."""

    id: str
    symbol: str
    label: str


@dataclass(frozen=True)
class BenchmarkResult:
    """Outcome of a benchmark load: whatever series loaded, plus a user-facing error."""

    series: list[BenchmarkSeries] = field(default_factory=list)
    error: str | None = None
    source: BenchmarkSource = "none"


def with_change(points: list[HistoricalDataPoint]) -> list[HistoricalDataPoint]:
    """Recompute `change` from each point's predecessor in the same series."""
    updated: list[HistoricalDataPoint] = []
    previous_price: float | None = None
    for point in points:
        change = 0.0
        if previous_price:
            change = (point.price - previous_price) / previous_price * 100
        updated.append(
            HistoricalDataPoint(
                timestamp=point.timestamp,
                value=point.value,
                price=point.price,
                change=change,
                label=point.label,
                volume=point.volume,
                synthetic=point.synthetic,
            )
        )
        previous_price = point.price
    return updated
