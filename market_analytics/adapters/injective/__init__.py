"""
Injective exchange indexer adapter module.

Components:
    IndexerMarketDataProvider: MarketDataProvider implementation
    IndexerRestClient: REST client for the indexer HTTP gateway
    IndexerNormalizer: Payload normalization utilities

Example:
    >>> from market_analytics.adapters.injective import IndexerMarketDataProvider
    >>> provider = IndexerMarketDataProvider(config.indexer)
    >>> snapshot = await provider.fetch_orderbook("0xabc")
"""

from market_analytics.adapters.injective.adapter import IndexerMarketDataProvider
from market_analytics.adapters.injective.normalizer import IndexerNormalizer
from market_analytics.adapters.injective.rest import IndexerRestClient

__all__ = [
    "IndexerMarketDataProvider",
    "IndexerRestClient",
    "IndexerNormalizer",
]
