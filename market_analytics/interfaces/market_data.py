"""
Abstract collaborators consumed by the analytics components.

The analytics engine never talks to an exchange or a cache server directly.
It is handed a MarketDataProvider and, for the orderbook analyzer, a
CacheStore at construction time. Concrete implementations live in
``market_analytics.adapters`` and ``market_analytics.storage``; tests
inject in-memory doubles.

Example:
    >>> class StaticProvider(MarketDataProvider):
    ...     async def fetch_orderbook(self, market_id):
    ...         return OrderBookSnapshot(market_id=market_id)
    ...
    ...     async def fetch_trades(self, market_id, limit):
    ...         return []
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from market_analytics.models.orderbook import OrderBookSnapshot
from market_analytics.models.trade import Trade


class MarketDataProvider(ABC):
    """
    Source of trades and order book snapshots.

    Contract:
        - ``fetch_orderbook`` returns both sides ordered best-first
          (bids highest price first, asks lowest price first).
        - ``fetch_trades`` returns at most ``limit`` trades, newest first.
        - Any fetch failure or timeout raises DataUnavailableError.
          Retry policy, if any, belongs to the implementation.
    """

    @abstractmethod
    async def fetch_orderbook(self, market_id: str) -> OrderBookSnapshot:
        """
        Fetch the current order book snapshot for a market.

        Args:
            market_id: Market identifier.

        Returns:
            OrderBookSnapshot: Snapshot with sides ordered best-first.

        Raises:
            DataUnavailableError: If the snapshot cannot be fetched.
        """
        pass

    @abstractmethod
    async def fetch_trades(self, market_id: str, limit: int) -> List[Trade]:
        """
        Fetch the most recent trades for a market.

        Args:
            market_id: Market identifier.
            limit: Maximum number of trades to return.

        Returns:
            List[Trade]: Up to ``limit`` trades, newest first.

        Raises:
            DataUnavailableError: If trades cannot be fetched.
        """
        pass

    async def close(self) -> None:
        """Release any held resources. Safe to call multiple times."""
        return None


class CacheStore(ABC):
    """
    Key-value store with per-key expiry.

    Values are opaque strings. Implementations raise CacheStoreError on
    backend failures.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Args:
            key: Cache key.

        Returns:
            Optional[str]: Stored value, or None if absent or expired.
        """
        pass

    @abstractmethod
    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        """
        Write a value that expires after ``ttl_seconds``.

        Args:
            key: Cache key.
            ttl_seconds: Time to live in seconds.
            value: Value to store.
        """
        pass

    async def close(self) -> None:
        """Release any held resources. Safe to call multiple times."""
        return None
