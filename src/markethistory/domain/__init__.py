"""Domain models."""

from .models import (
    AssetClass,
    BenchmarkResult,
    BenchmarkSeries,
    BenchmarkTarget,
    CacheEntry,
    HistoricalDataPoint,
    MarketPrice,
    Timeframe,
    timeframe_to_days,
    with_change,
)

__all__ = [
    "AssetClass",
    "BenchmarkResult",
    "BenchmarkSeries",
    "BenchmarkTarget",
    "CacheEntry",
    "HistoricalDataPoint",
    "MarketPrice",
    "Timeframe",
    "timeframe_to_days",
    "with_change",
]
