"""Market data provider implementations."""

from .alpha_vantage import AlphaVantageClient
from .base import HistoryProvider, PriceLookup
from .coingecko import CoinGeckoClient
from .fallback import synthesize
from .yahoo import YahooChartClient
from .yfinance_data import YFinancePriceLookup

__all__ = [
    "HistoryProvider",
    "PriceLookup",
    "AlphaVantageClient",
    "CoinGeckoClient",
    "YahooChartClient",
    "YFinancePriceLookup",
    "synthesize",
]
