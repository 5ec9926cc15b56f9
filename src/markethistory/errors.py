"""Custom exceptions for clearer error handling across the package."""


class MarketHistoryError(Exception):
    """Base exception for all package-specific errors."""


class ConfigError(MarketHistoryError, ValueError):
    """Raised when environment configuration is invalid or missing."""


class DataProviderError(MarketHistoryError):
    """Raised when market data retrieval fails."""
