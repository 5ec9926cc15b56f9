"""Map user-facing tickers to the identifiers each provider expects."""

from __future__ import annotations

import re

from markethistory.domain.models import AssetClass, BenchmarkTarget

COINGECKO_IDS: dict[str, str] = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "USDT": "tether",
    "BNB": "binancecoin",
    "SOL": "solana",
    "XRP": "ripple",
    "ADA": "cardano",
    "DOGE": "dogecoin",
    "DOT": "polkadot",
    "MATIC": "matic-network",
    "AVAX": "avalanche-2",
    "LINK": "chainlink",
    "UNI": "uniswap",
    "ATOM": "cosmos",
    "LTC": "litecoin",
}

BENCHMARKS: dict[str, tuple[str, str]] = {
    "SP500": ("^GSPC", "S&P 500"),
    "MSCI_WORLD": ("URTH", "MSCI World (URTH)"),
    "NASDAQ100": ("QQQ", "NASDAQ 100 (QQQ)"),
    "FTSE_MIB": ("FTSEMIB.MI", "FTSE MIB"),
    "GOLD": ("GC=F", "Gold"),
    "BTC": ("BTC-USD", "Bitcoin"),
}

CUSTOM_BENCHMARK_ID = "CUSTOM"

_EXCHANGE_SUFFIX = re.compile(r"\.(MI|US)$", re.IGNORECASE)


def resolve_symbol(symbol: str, asset_class: str) -> str:
    """Return the provider identifier for a symbol.

    Resolution always succeeds. Crypto tickers missing from the table pass
    through lower-cased, on the guess that the provider uses the same id;
    provider calls for such symbols may then fail and fall back.
    """
    text = symbol.strip()
    if AssetClass(asset_class) is AssetClass.CRYPTO:
        return COINGECKO_IDS.get(text.upper(), text.lower())
    return strip_exchange_suffix(text).upper()


def strip_exchange_suffix(symbol: str) -> str:
    return _EXCHANGE_SUFFIX.sub("", symbol.strip())


def resolve_benchmark_targets(
    ids: list[str],
    custom_symbols: list[str] | None = None,
) -> list[BenchmarkTarget]:
    """Resolve benchmark ids to chartable symbols.

    A CUSTOM id takes the custom symbol at the same position, else the first
    one. Targets without a symbol (and unknown ids) are dropped.
    """
    customs = [item.strip() for item in (custom_symbols or [])]
    targets: list[BenchmarkTarget] = []
    for index, raw_id in enumerate(ids):
        benchmark_id = raw_id.strip().upper()
        if benchmark_id == CUSTOM_BENCHMARK_ID:
            symbol = ""
            if index < len(customs) and customs[index]:
                symbol = customs[index]
            elif customs:
                symbol = customs[0]
            label = symbol or "Custom"
        else:
            symbol, label = BENCHMARKS.get(benchmark_id, ("", benchmark_id))
        if not symbol:
            continue
        targets.append(BenchmarkTarget(id=benchmark_id, symbol=symbol, label=label))
    return targets
