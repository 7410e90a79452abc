"""
Abstract interfaces for the analytics engine.

This module defines the collaborators the analytics components depend on
and the exceptions that cross those boundaries.

Example:
    >>> from market_analytics.interfaces import MarketDataProvider, CacheStore
    >>> from market_analytics.interfaces import DataUnavailableError

Modules:
    market_data: MarketDataProvider and CacheStore ABCs
    errors: AnalyticsError hierarchy
"""

from market_analytics.interfaces.errors import (
    AnalyticsError,
    CacheStoreError,
    DataUnavailableError,
)
from market_analytics.interfaces.market_data import CacheStore, MarketDataProvider

__all__: list[str] = [
    "MarketDataProvider",
    "CacheStore",
    "AnalyticsError",
    "DataUnavailableError",
    "CacheStoreError",
]
