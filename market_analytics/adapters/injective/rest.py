"""
Injective exchange indexer REST client.

Fetches spot orderbook snapshots and recent trades from the exchange
indexer's HTTP gateway.

Endpoints (paths configurable):
    Orderbook: GET {base}/api/exchange/spot/v2/orderbook/{market_id}
    Trades:    GET {base}/api/exchange/spot/v1/trades?marketId=...&limit=...

Every failure (HTTP error status, transport error, timeout, unparseable
body) surfaces as DataUnavailableError. The client does not retry.
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
import structlog

from market_analytics.adapters.injective.normalizer import IndexerNormalizer
from market_analytics.config.models import IndexerConfig
from market_analytics.interfaces.errors import DataUnavailableError
from market_analytics.models.orderbook import OrderBookSnapshot
from market_analytics.models.trade import Trade

logger = structlog.get_logger(__name__)


class IndexerRestClient:
    """
    Async REST client for the exchange indexer.

    Attributes:
        base_url: Indexer base URL.
        orderbook_path: Orderbook endpoint path template.
        trades_path: Trades endpoint path.
        timeout_seconds: Total request timeout.

    Example:
        >>> client = IndexerRestClient.from_config(IndexerConfig(network="testnet"))
        >>> snapshot = await client.get_orderbook("0xabc")
        >>> trades = await client.get_trades("0xabc", limit=50)
        >>> await client.close()
    """

    def __init__(
        self,
        base_url: str,
        orderbook_path: str = "/api/exchange/spot/v2/orderbook/{market_id}",
        trades_path: str = "/api/exchange/spot/v1/trades",
        timeout_seconds: int = 10,
    ):
        """
        Initialize REST client.

        Args:
            base_url: Indexer base URL.
            orderbook_path: Orderbook path, formatted with ``market_id``.
            trades_path: Trades path.
            timeout_seconds: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.orderbook_path = orderbook_path
        self.trades_path = trades_path
        self.timeout_seconds = timeout_seconds

        self._session: Optional[aiohttp.ClientSession] = None

        logger.info("indexer_client_initialized", base_url=self.base_url)

    @classmethod
    def from_config(cls, config: IndexerConfig) -> "IndexerRestClient":
        """Build a client from indexer configuration."""
        return cls(
            base_url=config.resolved_base_url,
            orderbook_path=config.orderbook_path,
            trades_path=config.trades_path,
            timeout_seconds=config.timeout_seconds,
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": "market-analytics/1.0", "Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("indexer_client_session_closed", base_url=self.base_url)
        self._session = None

    async def _get(
        self,
        endpoint: str,
        market_id: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make a GET request and parse the JSON body.

        Args:
            endpoint: API endpoint path.
            market_id: Market the request is for (error reporting).
            params: Query parameters.

        Returns:
            Dict[str, Any]: Parsed JSON response.

        Raises:
            DataUnavailableError: If the request fails for any reason.
        """
        session = await self._ensure_session()
        url = f"{self.base_url}{endpoint}"

        try:
            async with session.get(url, params=params) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    logger.error(
                        "indexer_request_failed",
                        url=url,
                        market_id=market_id,
                        status=response.status,
                        error=error_text[:500],
                    )
                    raise DataUnavailableError(
                        market_id,
                        f"Indexer request failed with status {response.status}",
                    )

                return await response.json(content_type=None)

        except aiohttp.ClientError as e:
            logger.error("indexer_client_error", url=url, market_id=market_id, error=str(e))
            raise DataUnavailableError(market_id, f"Indexer request failed: {e}", cause=e) from e
        except asyncio.TimeoutError as e:
            logger.error(
                "indexer_timeout",
                url=url,
                market_id=market_id,
                timeout=self.timeout_seconds,
            )
            raise DataUnavailableError(
                market_id,
                f"Indexer request timeout after {self.timeout_seconds}s",
                cause=e,
            ) from e
        except ValueError as e:
            logger.error("indexer_invalid_json", url=url, market_id=market_id, error=str(e))
            raise DataUnavailableError(market_id, f"Invalid indexer response: {e}", cause=e) from e

    async def get_orderbook(self, market_id: str) -> OrderBookSnapshot:
        """
        Fetch an orderbook snapshot.

        Args:
            market_id: Market identifier.

        Returns:
            OrderBookSnapshot: Snapshot with sides ordered best-first.

        Raises:
            DataUnavailableError: If the request fails or the body is invalid.
        """
        data = await self._get(self.orderbook_path.format(market_id=market_id), market_id)

        try:
            snapshot = IndexerNormalizer.normalize_orderbook(data, market_id)
        except ValueError as e:
            logger.error("indexer_orderbook_parse_error", market_id=market_id, error=str(e))
            raise DataUnavailableError(market_id, f"Invalid orderbook response: {e}", cause=e) from e

        logger.debug(
            "indexer_orderbook_fetched",
            market_id=market_id,
            bids_count=len(snapshot.bids),
            asks_count=len(snapshot.asks),
        )
        return snapshot

    async def get_trades(self, market_id: str, limit: int = 50) -> List[Trade]:
        """
        Fetch recent trades, newest first.

        Args:
            market_id: Market identifier.
            limit: Maximum number of trades.

        Returns:
            List[Trade]: Up to ``limit`` trades.

        Raises:
            DataUnavailableError: If the request fails or the body is invalid.
        """
        params = {"marketId": market_id, "limit": limit}
        data = await self._get(self.trades_path, market_id, params)

        try:
            trades = IndexerNormalizer.normalize_trades(data, limit=limit)
        except ValueError as e:
            logger.error("indexer_trades_parse_error", market_id=market_id, error=str(e))
            raise DataUnavailableError(market_id, f"Invalid trades response: {e}", cause=e) from e

        logger.debug("indexer_trades_fetched", market_id=market_id, count=len(trades))
        return trades
