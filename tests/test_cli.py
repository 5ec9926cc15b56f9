from __future__ import annotations

from typing import Any

import pytest

from markethistory.cli import apply_cli_overrides, build_parser, main
from markethistory.config import Settings


def test_cli_overrides_produce_expected_settings() -> None:
    parser = build_parser()
    args = parser.parse_args(
        [
            "--benchmark",
            "--ids",
            "SP500,GOLD",
            "--months",
            "24",
            "--snapshot-db",
            "state/snapshots.db",
            "--benchmark-service-url",
            "https://example.test/get-benchmark",
            "--timeout",
            "5",
            "--log-level",
            "WARNING",
        ]
    )
    settings = apply_cli_overrides(Settings(), args)

    assert settings.snapshot_db_path == "state/snapshots.db"
    assert settings.benchmark_service_url == "https://example.test/get-benchmark"
    assert settings.http_timeout_seconds == 5
    assert settings.log_level == "WARNING"


def test_history_mode_requires_symbols() -> None:
    args = build_parser().parse_args(["--asset", "stock"])

    with pytest.raises(ValueError, match="--symbols is required"):
        apply_cli_overrides(Settings(), args)


def test_benchmark_mode_requires_ids() -> None:
    args = build_parser().parse_args(["--benchmark"])

    with pytest.raises(ValueError, match="--benchmark requires --ids"):
        apply_cli_overrides(Settings(), args)


def test_cli_rejects_unknown_benchmark_ids() -> None:
    args = build_parser().parse_args(["--benchmark", "--ids", "SP500,DAX"])

    with pytest.raises(ValueError, match="Unknown benchmark ids DAX"):
        apply_cli_overrides(Settings(), args)


def test_cli_rejects_non_positive_months() -> None:
    args = build_parser().parse_args(["--benchmark", "--ids", "SP500", "--months", "0"])

    with pytest.raises(ValueError):
        apply_cli_overrides(Settings(), args)


def test_cli_rejects_unknown_asset_class() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--asset", "bond", "--symbols", "X"])


def test_main_returns_two_on_configuration_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("markethistory.cli.Settings.from_env", classmethod(lambda cls: cls()))

    assert main(["--benchmark"]) == 2
    assert "Configuration error" in capsys.readouterr().out


def test_main_dispatches_history_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def fake_show_history(settings: Settings, **kwargs: Any) -> int:
        captured.update(kwargs)
        return 0

    monkeypatch.setattr("markethistory.cli.Settings.from_env", classmethod(lambda cls: cls()))
    monkeypatch.setattr("markethistory.cli.show_history", fake_show_history)

    assert main(["--asset", "etf", "--symbols", "swda.mi,vwce", "--timeframe", "3m"]) == 0
    assert captured == {
        "asset_class": "etf",
        "symbols": ["SWDA.MI", "VWCE"],
        "timeframe": "3M",
        "report_path": None,
    }


def test_main_dispatches_benchmark_load(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def fake_show_benchmarks(settings: Settings, **kwargs: Any) -> int:
        captured.update(kwargs)
        return 0

    monkeypatch.setattr("markethistory.cli.Settings.from_env", classmethod(lambda cls: cls()))
    monkeypatch.setattr("markethistory.cli.show_benchmarks", fake_show_benchmarks)

    assert main(["--benchmark", "--ids", "sp500,custom", "--custom-symbols", "ENI.MI"]) == 0
    assert captured["ids"] == ["SP500", "CUSTOM"]
    assert captured["months"] == 12
    assert captured["custom_symbols"] == ["ENI.MI"]
