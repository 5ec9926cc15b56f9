"""Plotly HTML charts for history and benchmark results."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from markethistory.domain.models import BenchmarkSeries, HistoricalDataPoint


def history_frame(points: list[HistoricalDataPoint]) -> pd.DataFrame:
    """Tabulate points with a `source` column telling real from synthetic data."""
    if not points:
        return pd.DataFrame(columns=["timestamp", "price", "change", "label", "source"])
    frame = pd.DataFrame([point.to_record() for point in points])
    frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True, errors="coerce")
    frame["source"] = frame["synthetic"].map({True: "synthetic", False: "provider"})
    return frame


def generate_history_report(points: list[HistoricalDataPoint], output_html_path: str) -> None:
    """Render price history lines, one per label."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    frame = history_frame(points)
    if frame.empty:
        figure = go.Figure(layout={"title": {"text": "Price History (no data)"}})
    else:
        figure = px.line(
            frame,
            x="timestamp",
            y="price",
            color="label",
            line_dash="source",
            title="Price History",
            hover_data=["change"],
        )
    figure.write_html(str(output), include_plotlyjs="cdn")


def generate_benchmark_report(series: list[BenchmarkSeries], output_html_path: str) -> None:
    """Render rebased benchmark lines against a month index."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    rows = [
        {"month": index + 1, "value": value, "benchmark": item.label}
        for item in series
        for index, value in enumerate(item.data)
    ]
    if not rows:
        figure = go.Figure(layout={"title": {"text": "Benchmarks (no data)"}})
    else:
        figure = px.line(
            pd.DataFrame(rows),
            x="month",
            y="value",
            color="benchmark",
            title="Benchmarks (rebased to 100)",
        )
    figure.write_html(str(output), include_plotlyjs="cdn")
