"""
Orderbook analyzer for depth, spread, concentration and whale detection.

Turns one order book snapshot into an OrderbookAnalysis and caches it per
market for a short TTL so repeated calls do not hit the market data
provider.

Key Formulas:
    whale_threshold = 0.05 * max(total_bid_volume, total_ask_volume)
    mid_price = (best_bid + best_ask) / 2
    spread = best_ask - best_bid
    spread_percentage = spread / mid_price * 100
    liquidity_concentration = (top10_bid + top10_ask) / (total_bid + total_ask)
    bid1_percent = best_bid_quantity / total_bid_volume

Classes:
    OrderbookAnalyzer: Read-through cached orderbook analysis
"""

from decimal import Decimal
from typing import Optional

import structlog
from pydantic import ValidationError

from market_analytics.interfaces.errors import CacheStoreError
from market_analytics.interfaces.market_data import CacheStore, MarketDataProvider
from market_analytics.metrics.statistics import clamp01, safe_ratio
from market_analytics.models.numeric import ZERO, finite_float
from market_analytics.models.orderbook import OrderBookSnapshot
from market_analytics.models.orderbook_analysis import (
    DepthMetrics,
    OrderbookAnalysis,
    SpreadAnalysis,
    WhaleOrder,
)
from market_analytics.models.trade import TradeSide

logger = structlog.get_logger(__name__)


class OrderbookAnalyzer:
    """
    Analyzer for a single market's order book.

    Reads through the injected cache store: a cached analysis younger than
    the TTL is returned verbatim, otherwise one snapshot is fetched,
    analyzed and written back. Concurrent misses for the same market may
    both compute and both write; the writes are identical.

    Edge Cases Handled:
        - Empty side: best price and top quantity read as 0
        - Zero total volume: concentration and top-of-book share are 0
        - Non-positive mid price: spread percentage is 0
        - Cache backend failure: logged, analysis computed uncached
        - Corrupt cached payload: logged, discarded and recomputed

    Example:
        >>> analyzer = OrderbookAnalyzer(provider, cache)
        >>> analysis = await analyzer.analyze("0xabc")
        >>> analysis.spread_analysis.spread_percentage

    Attributes:
        provider: Market data provider.
        cache: Cache store for analysis results.
        cache_ttl_seconds: Expiry of cached analyses.
        whale_threshold_ratio: Fraction of the larger side's volume an order
            must reach to be tagged a whale.
        concentration_levels: Top-of-book levels per side counted toward
            liquidity concentration.
    """

    CACHE_KEY_PREFIX = "orderbook:analysis"

    def __init__(
        self,
        provider: MarketDataProvider,
        cache: CacheStore,
        cache_ttl_seconds: int = 30,
        whale_threshold_ratio: Decimal = Decimal("0.05"),
        concentration_levels: int = 10,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds
        self.whale_threshold_ratio = whale_threshold_ratio
        self.concentration_levels = concentration_levels

    @classmethod
    def cache_key(cls, market_id: str) -> str:
        """Cache key for a market's analysis."""
        return f"{cls.CACHE_KEY_PREFIX}:{market_id}"

    async def analyze(self, market_id: str) -> OrderbookAnalysis:
        """
        Analyze a market's order book, reading through the cache.

        Args:
            market_id: Market identifier.

        Returns:
            OrderbookAnalysis: Cached or freshly computed analysis.

        Raises:
            DataUnavailableError: If the snapshot cannot be fetched.
        """
        key = self.cache_key(market_id)

        cached = await self._read_cache(key)
        if cached is not None:
            logger.debug("orderbook_cache_hit", market_id=market_id)
            return cached

        snapshot = await self.provider.fetch_orderbook(market_id)
        analysis = self.calculate(market_id, snapshot)

        await self._write_cache(key, analysis)
        logger.debug(
            "orderbook_analyzed",
            market_id=market_id,
            bids=len(snapshot.bids),
            asks=len(snapshot.asks),
            whales=len(analysis.whale_orders),
        )
        return analysis

    def calculate(self, market_id: str, snapshot: OrderBookSnapshot) -> OrderbookAnalysis:
        """
        Compute the analysis for a snapshot without touching the cache.

        Args:
            market_id: Market identifier reported in the result.
            snapshot: Order book with sides ordered best-first.

        Returns:
            OrderbookAnalysis: Computed analysis.

        Example:
            >>> snapshot = OrderBookSnapshot(
            ...     market_id="m",
            ...     bids=[OrderLevel(price="100", quantity="5"), OrderLevel(price="99", quantity="3")],
            ...     asks=[OrderLevel(price="101", quantity="4"), OrderLevel(price="102", quantity="6")],
            ... )
            >>> analysis = analyzer.calculate("m", snapshot)
            >>> # mid = 100.5, spread = 1, spread% = 1 / 100.5 * 100 = 0.995...
        """
        total_bid_volume = snapshot.total_bid_volume
        total_ask_volume = snapshot.total_ask_volume

        # Whales, bids first then asks
        whale_threshold = max(total_bid_volume, total_ask_volume) * self.whale_threshold_ratio
        whale_orders = [
            WhaleOrder(price=level.price, quantity=level.quantity, side=side)
            for side, levels in ((TradeSide.BUY, snapshot.bids), (TradeSide.SELL, snapshot.asks))
            for level in levels
            if level.quantity >= whale_threshold
        ]

        # Spread
        best_bid = snapshot.best_bid
        best_ask = snapshot.best_ask
        mid_price = (best_bid + best_ask) / Decimal("2")
        spread = best_ask - best_bid
        spread_percentage = (
            spread / mid_price * Decimal("100") if mid_price > ZERO else ZERO
        )

        # Concentration of volume in the top levels (a ratio, not HHI)
        top_volume = snapshot.top_volume("bid", self.concentration_levels) + snapshot.top_volume(
            "ask", self.concentration_levels
        )
        liquidity_concentration = clamp01(
            safe_ratio(top_volume, total_bid_volume + total_ask_volume)
        )

        return OrderbookAnalysis(
            market_id=market_id,
            liquidity_concentration=finite_float(liquidity_concentration),
            whale_orders=whale_orders,
            spread_analysis=SpreadAnalysis(
                bid_ask_spread=finite_float(spread),
                spread_percentage=finite_float(spread_percentage),
                mid_price=finite_float(mid_price),
            ),
            depth_metrics=DepthMetrics(
                bid1_percent=finite_float(safe_ratio(snapshot.best_bid_quantity, total_bid_volume)),
                ask1_percent=finite_float(safe_ratio(snapshot.best_ask_quantity, total_ask_volume)),
                total_bid_volume=finite_float(total_bid_volume),
                total_ask_volume=finite_float(total_ask_volume),
            ),
        )

    async def _read_cache(self, key: str) -> Optional[OrderbookAnalysis]:
        try:
            payload = await self.cache.get(key)
        except CacheStoreError as e:
            logger.warning("orderbook_cache_read_failed", key=key, error=str(e))
            return None

        if payload is None:
            return None

        try:
            return OrderbookAnalysis.model_validate_json(payload)
        except ValidationError as e:
            logger.warning("orderbook_cache_payload_invalid", key=key, error=str(e))
            return None

    async def _write_cache(self, key: str, analysis: OrderbookAnalysis) -> None:
        try:
            await self.cache.set_with_expiry(key, self.cache_ttl_seconds, analysis.to_json())
        except CacheStoreError as e:
            logger.warning("orderbook_cache_write_failed", key=key, error=str(e))

    def __repr__(self) -> str:
        return (
            f"OrderbookAnalyzer(ttl={self.cache_ttl_seconds}s, "
            f"whale_ratio={self.whale_threshold_ratio}, levels={self.concentration_levels})"
        )
