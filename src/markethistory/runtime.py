"""Runtime wiring for the command-line entrypoints."""

from __future__ import annotations

from markethistory.benchmark import BenchmarkLoader
from markethistory.config import Settings
from markethistory.history import HistoryClient
from markethistory.logging.logger import HumanLogger, configure_logging
from markethistory.logging.report import generate_benchmark_report, generate_history_report
from markethistory.state.sqlite_store import SqliteSnapshotStore
from markethistory.state.store import NoopSnapshotStore, SnapshotStore


def build_history_client(settings: Settings) -> HistoryClient:
    return HistoryClient(settings)


def build_snapshot_store(settings: Settings) -> SnapshotStore:
    if settings.snapshot_db_path:
        return SqliteSnapshotStore(settings.snapshot_db_path)
    return NoopSnapshotStore()


def build_benchmark_loader(settings: Settings, store: SnapshotStore) -> BenchmarkLoader:
    return BenchmarkLoader.from_settings(settings, store=store)


def show_history(
    settings: Settings,
    asset_class: str,
    symbols: list[str],
    timeframe: str,
    report_path: str | None = None,
) -> int:
    """Print one summary line per symbol and optionally chart them together."""
    configure_logging(settings.log_level)
    human_logger = HumanLogger(level=settings.log_level)
    client = build_history_client(settings)

    collected = []
    for symbol in symbols:
        points = client.get_historical_data(asset_class, symbol, timeframe)
        human_logger.series(asset_class, symbol, points)
        collected.extend(points)

    if report_path:
        generate_history_report(collected, report_path)
    return 0


def show_benchmarks(
    settings: Settings,
    ids: list[str],
    months: int,
    custom_symbols: list[str] | None = None,
    report_path: str | None = None,
) -> int:
    """Load benchmark series, print them and optionally chart them."""
    configure_logging(settings.log_level)
    human_logger = HumanLogger(level=settings.log_level)
    store = build_snapshot_store(settings)
    try:
        loader = build_benchmark_loader(settings, store)
        result = loader.load(ids, months, custom_symbols)
        human_logger.benchmark(result)
        if report_path:
            generate_benchmark_report(result.series, report_path)
    finally:
        store.close()
    return 0
