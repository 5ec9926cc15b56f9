from __future__ import annotations

from pathlib import Path

from markethistory.domain.models import BenchmarkSeries, HistoricalDataPoint
from markethistory.logging.report import (
    generate_benchmark_report,
    generate_history_report,
    history_frame,
)


def _points() -> list[HistoricalDataPoint]:
    return [
        HistoricalDataPoint(
            timestamp="2025-01-01T00:00:00+00:00", value=10.0, price=10.0, label="BTC"
        ),
        HistoricalDataPoint(
            timestamp="2025-01-02T00:00:00+00:00",
            value=11.0,
            price=11.0,
            change=10.0,
            label="BTC",
            synthetic=True,
        ),
    ]


def test_history_frame_marks_point_source() -> None:
    frame = history_frame(_points())

    assert list(frame["source"]) == ["provider", "synthetic"]
    assert str(frame["timestamp"].dt.tz) == "UTC"


def test_history_report_writes_html(tmp_path: Path) -> None:
    output = tmp_path / "reports" / "history.html"

    generate_history_report(_points(), str(output))

    html = output.read_text(encoding="utf-8")
    assert "Price History" in html


def test_empty_history_report_still_writes_html(tmp_path: Path) -> None:
    output = tmp_path / "empty.html"

    generate_history_report([], str(output))

    assert "no data" in output.read_text(encoding="utf-8")


def test_benchmark_report_writes_html(tmp_path: Path) -> None:
    output = tmp_path / "benchmarks.html"
    series = [BenchmarkSeries(id="SP500", label="S&P 500", data=[100.0, 104.0, 102.0])]

    generate_benchmark_report(series, str(output))

    assert "Benchmarks (rebased to 100)" in output.read_text(encoding="utf-8")
