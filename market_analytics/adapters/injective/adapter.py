"""
Injective market data provider.

Implements the MarketDataProvider interface on top of the exchange indexer
REST client.
"""

from typing import List, Optional

import structlog

from market_analytics.adapters.injective.rest import IndexerRestClient
from market_analytics.config.models import IndexerConfig
from market_analytics.interfaces.market_data import MarketDataProvider
from market_analytics.models.orderbook import OrderBookSnapshot
from market_analytics.models.trade import Trade

logger = structlog.get_logger(__name__)


class IndexerMarketDataProvider(MarketDataProvider):
    """
    Market data provider backed by the Injective exchange indexer.

    Example:
        >>> provider = IndexerMarketDataProvider(IndexerConfig(network="mainnet"))
        >>> trades = await provider.fetch_trades("0xabc", limit=50)
        >>> await provider.close()
    """

    def __init__(
        self,
        config: Optional[IndexerConfig] = None,
        client: Optional[IndexerRestClient] = None,
    ) -> None:
        self.config = config or IndexerConfig()
        self.client = client or IndexerRestClient.from_config(self.config)

        logger.info(
            "indexer_provider_initialized",
            network=self.config.network.value,
            base_url=self.client.base_url,
        )

    async def fetch_orderbook(self, market_id: str) -> OrderBookSnapshot:
        return await self.client.get_orderbook(market_id)

    async def fetch_trades(self, market_id: str, limit: int) -> List[Trade]:
        return await self.client.get_trades(market_id, limit=limit)

    async def close(self) -> None:
        await self.client.close()
