"""Environment runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from markethistory.errors import ConfigError

DEFAULT_COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_ALPHAVANTAGE_BASE_URL = "https://www.alphavantage.co/query"
DEFAULT_YAHOO_CHART_BASE_URL = "https://query1.finance.yahoo.com"

REAL_DATA_TTL_MS = 3_600_000
SYNTHETIC_DATA_TTL_MS = 1_800_000


def parse_symbols(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated symbols."""
    fallback = default or []
    if not value:
        return list(fallback)
    symbols = [item.strip().upper() for item in value.split(",") if item.strip()]
    return symbols or list(fallback)


def parse_positive_int(value: str | None, default: int, *, field_name: str) -> int:
    """Parse positive integer values from env strings."""
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ConfigError(f"{field_name} must be positive")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    alphavantage_api_key: str = ""
    coingecko_base_url: str = DEFAULT_COINGECKO_BASE_URL
    alphavantage_base_url: str = DEFAULT_ALPHAVANTAGE_BASE_URL
    yahoo_chart_base_url: str = DEFAULT_YAHOO_CHART_BASE_URL
    benchmark_service_url: str = ""
    benchmark_service_key: str = ""
    http_timeout_seconds: int = 15
    real_data_ttl_ms: int = REAL_DATA_TTL_MS
    synthetic_data_ttl_ms: int = SYNTHETIC_DATA_TTL_MS
    alphavantage_max_days: int = 100
    vs_currency: str = "eur"
    snapshot_db_path: str = ""
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            alphavantage_api_key=str(os.getenv("ALPHAVANTAGE_API_KEY", "")).strip(),
            coingecko_base_url=str(
                os.getenv("COINGECKO_BASE_URL", DEFAULT_COINGECKO_BASE_URL)
            ).strip(),
            alphavantage_base_url=str(
                os.getenv("ALPHAVANTAGE_BASE_URL", DEFAULT_ALPHAVANTAGE_BASE_URL)
            ).strip(),
            yahoo_chart_base_url=str(
                os.getenv("YAHOO_CHART_BASE_URL", DEFAULT_YAHOO_CHART_BASE_URL)
            ).strip(),
            benchmark_service_url=str(os.getenv("BENCHMARK_SERVICE_URL", "")).strip(),
            benchmark_service_key=str(os.getenv("BENCHMARK_SERVICE_KEY", "")).strip(),
            http_timeout_seconds=parse_positive_int(
                os.getenv("HTTP_TIMEOUT_SECONDS"), 15, field_name="HTTP_TIMEOUT_SECONDS"
            ),
            real_data_ttl_ms=parse_positive_int(
                os.getenv("REAL_DATA_TTL_MS"), REAL_DATA_TTL_MS, field_name="REAL_DATA_TTL_MS"
            ),
            synthetic_data_ttl_ms=parse_positive_int(
                os.getenv("SYNTHETIC_DATA_TTL_MS"),
                SYNTHETIC_DATA_TTL_MS,
                field_name="SYNTHETIC_DATA_TTL_MS",
            ),
            alphavantage_max_days=parse_positive_int(
                os.getenv("ALPHAVANTAGE_MAX_DAYS"), 100, field_name="ALPHAVANTAGE_MAX_DAYS"
            ),
            vs_currency=str(os.getenv("VS_CURRENCY", "eur")).strip().lower(),
            snapshot_db_path=str(os.getenv("SNAPSHOT_DB_PATH", "")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def has_alphavantage_key(self) -> bool:
        return bool(self.alphavantage_api_key.strip())

    def validate(self) -> Self:
        """Validate settings fields."""
        if self.http_timeout_seconds <= 0:
            raise ConfigError("http_timeout_seconds must be positive")
        if self.real_data_ttl_ms <= 0 or self.synthetic_data_ttl_ms <= 0:
            raise ConfigError("cache TTL values must be positive")
        if self.alphavantage_max_days <= 0:
            raise ConfigError("alphavantage_max_days must be positive")
        if not self.vs_currency:
            raise ConfigError("vs_currency cannot be empty")
        for name in ("coingecko_base_url", "alphavantage_base_url", "yahoo_chart_base_url"):
            url = getattr(self, name)
            if not url.startswith(("http://", "https://")):
                raise ConfigError(f"{name} must be an http(s) URL")
        if self.benchmark_service_url and not self.benchmark_service_url.startswith(
            ("http://", "https://")
        ):
            raise ConfigError("benchmark_service_url must be an http(s) URL")
        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return self
