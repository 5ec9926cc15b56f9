"""Fetch-with-fallback-and-cache orchestration for historical series."""

from __future__ import annotations

import logging
import random
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from markethistory.cache import TTLCache, history_cache_key
from markethistory.config import Settings
from markethistory.data.alpha_vantage import AlphaVantageClient
from markethistory.data.base import PriceLookup
from markethistory.data.coingecko import CoinGeckoClient
from markethistory.data.fallback import synthesize, volatility_band_for
from markethistory.data.symbols import resolve_symbol
from markethistory.data.yfinance_data import YFinancePriceLookup
from markethistory.domain.models import (
    AssetClass,
    HistoricalDataPoint,
    MarketPrice,
    timeframe_to_days,
)
from markethistory.errors import DataProviderError

logger = logging.getLogger("markethistory.history")

PostProcess = Callable[[list[HistoricalDataPoint], str], list[HistoricalDataPoint]]

_ETF_LISTING_SUFFIX = re.compile(r"\.MI$")


def _always_available(_days: int) -> bool:
    return True


def keep_series(points: list[HistoricalDataPoint], _symbol: str) -> list[HistoricalDataPoint]:
    return points


def rename_etf_labels(points: list[HistoricalDataPoint], symbol: str) -> list[HistoricalDataPoint]:
    """Show Milan-listed ETFs as `<TICKER> ETF` instead of `<TICKER>.MI`."""
    renamed: list[HistoricalDataPoint] = []
    for point in points:
        renamed.append(
            HistoricalDataPoint(
                timestamp=point.timestamp,
                value=point.value,
                price=point.price,
                change=point.change,
                label=_ETF_LISTING_SUFFIX.sub(" ETF", point.label or symbol),
                volume=point.volume,
                synthetic=point.synthetic,
            )
        )
    return renamed


@dataclass(frozen=True)
class HistorySource:
    """Capabilities one asset class plugs into `fetch_history`."""

    asset_class: AssetClass
    resolve_symbol: Callable[[str], str]
    fetch_from_provider: Callable[[str, int, str], list[HistoricalDataPoint]]
    current_price: Callable[[str], MarketPrice | None]
    volatility_band: float
    is_available: Callable[[int], bool] = _always_available
    post_process: PostProcess = keep_series


def fetch_history(
    source: HistorySource,
    cache: TTLCache,
    symbol: str,
    timeframe: str,
    *,
    real_ttl_ms: int,
    synthetic_ttl_ms: int,
    now: Callable[[], datetime] | None = None,
    rng: random.Random | None = None,
) -> list[HistoricalDataPoint]:
    """Return a series for (symbol, timeframe), or [] when nothing is obtainable.

    Order: fresh cache hit, provider data (cached with the long TTL), then a
    synthetic series seeded from the current price (cached with the short
    TTL). Never raises.
    """
    key = history_cache_key(source.asset_class.value, symbol, timeframe)
    cached = cache.get_fresh(key)
    if cached is not None:
        logger.debug("Cache hit for %s %s", source.asset_class.value, symbol)
        return source.post_process(cached, symbol)

    try:
        days = timeframe_to_days(timeframe)
        if source.is_available(days):
            provider_id = source.resolve_symbol(symbol)
            try:
                points = source.fetch_from_provider(provider_id, days, symbol)
            except DataProviderError as exc:
                logger.warning(
                    "%s provider failed for %s, using fallback: %s",
                    source.asset_class.value,
                    symbol,
                    exc,
                )
                points = []
            except Exception:
                logger.exception(
                    "Unreadable %s provider response for %s, using fallback",
                    source.asset_class.value,
                    symbol,
                )
                points = []
            if points:
                cache.set(key, points, real_ttl_ms)
                return source.post_process(points, symbol)

        quote = source.current_price(symbol)
        if quote is None:
            logger.warning("No price data for %s %s", source.asset_class.value, symbol)
            return []

        clock = now or (lambda: datetime.now(tz=UTC))
        points = synthesize(
            quote.price,
            days,
            source.volatility_band,
            label=symbol,
            now=clock(),
            rng=rng,
        )
        cache.set(key, points, synthetic_ttl_ms)
        logger.info(
            "Serving synthetic %s history for %s (%s points)",
            source.asset_class.value,
            symbol,
            len(points),
        )
        return source.post_process(points, symbol)
    except Exception:
        logger.exception("Error fetching %s data for %s", source.asset_class.value, symbol)
        return []


def build_sources(
    coingecko: CoinGeckoClient,
    alpha_vantage: AlphaVantageClient,
    equity_prices: PriceLookup,
    alphavantage_max_days: int = 100,
) -> dict[AssetClass, HistorySource]:
    """Compose the crypto, stock and ETF capability sets."""

    def equity_available(days: int) -> bool:
        return alpha_vantage.configured and days <= alphavantage_max_days

    stock = HistorySource(
        asset_class=AssetClass.STOCK,
        resolve_symbol=lambda symbol: resolve_symbol(symbol, AssetClass.STOCK),
        fetch_from_provider=alpha_vantage.fetch_history,
        current_price=equity_prices.fetch_price,
        volatility_band=volatility_band_for(AssetClass.STOCK),
        is_available=equity_available,
    )
    return {
        AssetClass.CRYPTO: HistorySource(
            asset_class=AssetClass.CRYPTO,
            resolve_symbol=lambda symbol: resolve_symbol(symbol, AssetClass.CRYPTO),
            fetch_from_provider=coingecko.fetch_history,
            current_price=coingecko.fetch_price,
            volatility_band=volatility_band_for(AssetClass.CRYPTO),
        ),
        AssetClass.STOCK: stock,
        AssetClass.ETF: HistorySource(
            asset_class=AssetClass.ETF,
            resolve_symbol=stock.resolve_symbol,
            fetch_from_provider=stock.fetch_from_provider,
            current_price=stock.current_price,
            volatility_band=volatility_band_for(AssetClass.ETF),
            is_available=equity_available,
            post_process=rename_etf_labels,
        ),
    }


class HistoryClient:
    """Historical data for every asset class, sharing one owned cache."""

    def __init__(
        self,
        settings: Settings,
        cache: TTLCache | None = None,
        sources: dict[AssetClass, HistorySource] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings
        self.cache = cache if cache is not None else TTLCache()
        self.sources = sources or build_sources(
            coingecko=CoinGeckoClient(
                base_url=settings.coingecko_base_url,
                vs_currency=settings.vs_currency,
                timeout=settings.http_timeout_seconds,
            ),
            alpha_vantage=AlphaVantageClient(
                api_key=settings.alphavantage_api_key,
                base_url=settings.alphavantage_base_url,
                timeout=settings.http_timeout_seconds,
            ),
            equity_prices=YFinancePriceLookup(),
            alphavantage_max_days=settings.alphavantage_max_days,
        )
        self.rng = rng

    def get_historical_data(
        self, asset_class: str, symbol: str, timeframe: str
    ) -> list[HistoricalDataPoint]:
        source = self.sources[AssetClass(asset_class)]
        return fetch_history(
            source,
            self.cache,
            symbol,
            timeframe,
            real_ttl_ms=self.settings.real_data_ttl_ms,
            synthetic_ttl_ms=self.settings.synthetic_data_ttl_ms,
            rng=self.rng,
        )
