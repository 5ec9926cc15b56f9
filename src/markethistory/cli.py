"""Command-line interface for market history lookups."""

from __future__ import annotations

import argparse
import sys

from markethistory.config import Settings, parse_symbols
from markethistory.data.symbols import BENCHMARKS, CUSTOM_BENCHMARK_ID
from markethistory.domain.models import AssetClass, Timeframe
from markethistory.runtime import show_benchmarks, show_history


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Cached market history and benchmark series")
    parser.add_argument(
        "--asset",
        choices=[item.value for item in AssetClass],
        default=AssetClass.CRYPTO.value,
        help="Asset class of --symbols",
    )
    parser.add_argument("--symbols", type=str, help="Comma-separated symbols")
    parser.add_argument(
        "--timeframe",
        type=str,
        default=Timeframe.ONE_MONTH.value,
        help="Chart range: 1D, 1W, 1M, 3M, 6M, 1Y or ALL",
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Load benchmark index series instead of symbol history",
    )
    parser.add_argument("--ids", type=str, help="Comma-separated benchmark ids")
    parser.add_argument("--months", type=int, default=12, help="Benchmark months to return")
    parser.add_argument(
        "--custom-symbols", type=str, help="Comma-separated symbols for CUSTOM benchmark ids"
    )
    parser.add_argument("--report", type=str, help="Write a Plotly HTML chart to this path")
    parser.add_argument("--snapshot-db", type=str, help="SQLite path for benchmark snapshots")
    parser.add_argument("--benchmark-service-url", type=str, help="Benchmark aggregation URL")
    parser.add_argument("--timeout", type=int, help="HTTP timeout in seconds")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    if args.benchmark:
        if not args.ids:
            raise ValueError("--benchmark requires --ids")
        if args.months <= 0:
            raise ValueError("--months must be positive")
        supported = {*BENCHMARKS, CUSTOM_BENCHMARK_ID}
        unknown = [item for item in parse_symbols(args.ids) if item not in supported]
        if unknown:
            raise ValueError(
                f"Unknown benchmark ids {', '.join(unknown)}. "
                f"Supported: {', '.join(sorted(supported))}"
            )
    elif not args.symbols:
        raise ValueError("--symbols is required unless --benchmark is set")

    overrides: dict[str, object] = {}
    if args.snapshot_db:
        overrides["snapshot_db_path"] = args.snapshot_db
    if args.benchmark_service_url:
        overrides["benchmark_service_url"] = args.benchmark_service_url
    if args.timeout is not None:
        overrides["http_timeout_seconds"] = args.timeout
    if args.log_level:
        overrides["log_level"] = args.log_level
    return settings.with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    if args.benchmark:
        return show_benchmarks(
            settings,
            ids=parse_symbols(args.ids),
            months=args.months,
            custom_symbols=parse_symbols(args.custom_symbols),
            report_path=args.report,
        )
    return show_history(
        settings,
        asset_class=args.asset,
        symbols=parse_symbols(args.symbols),
        timeframe=args.timeframe.strip().upper(),
        report_path=args.report,
    )


if __name__ == "__main__":
    sys.exit(main())
