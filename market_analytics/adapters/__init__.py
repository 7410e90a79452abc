"""
Market data provider adapters.

Each adapter implements the MarketDataProvider interface and normalizes
its source's payloads into unified models.
"""

from market_analytics.adapters.injective import IndexerMarketDataProvider

__all__: list[str] = [
    "IndexerMarketDataProvider",
]
