"""Logging setup and concise human-readable CLI output."""

from __future__ import annotations

import logging

from markethistory.domain.models import BenchmarkResult, HistoricalDataPoint


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Configure and return the package logger with a single console handler."""
    logger = logging.getLogger("markethistory")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("markethistory.cli")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def series(self, asset_class: str, symbol: str, points: list[HistoricalDataPoint]) -> None:
        if not points:
            self._logger.info("series | %s | %s | no data", asset_class, symbol)
            return
        first, last = points[0], points[-1]
        total_change = 0.0
        if first.price:
            total_change = (last.price - first.price) / first.price * 100
        parts = [
            f"series | {asset_class} | {symbol}",
            f"points {len(points)}",
            f"first {self._format_price(first.price)} @ {self._short_date(first.timestamp)}",
            f"last {self._format_price(last.price)} @ {self._short_date(last.timestamp)}",
            f"change {total_change:+.2f}%",
        ]
        if any(point.synthetic for point in points):
            parts.append("synthetic")
        self._logger.info(" | ".join(parts))

    def benchmark(self, result: BenchmarkResult) -> None:
        for item in result.series:
            last = item.data[-1] if item.data else None
            last_text = f"{last:,.2f}" if last is not None else "-"
            self._logger.info(
                "benchmark | %s | %s | months %s | last %s | source %s",
                item.id,
                item.label,
                len(item.data),
                last_text,
                result.source,
            )
        if result.error:
            self.error(result.error)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _format_price(value: float) -> str:
        if abs(value) >= 1:
            return f"{value:,.2f}"
        return f"{value:.6f}".rstrip("0").rstrip(".") or "0"

    @staticmethod
    def _short_date(timestamp: str) -> str:
        return timestamp[:10]
