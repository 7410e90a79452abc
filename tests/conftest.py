"""Shared fixtures and in-memory doubles for the analytics tests."""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set, Tuple

import pytest

from market_analytics.interfaces import CacheStore, CacheStoreError, DataUnavailableError
from market_analytics.interfaces import MarketDataProvider
from market_analytics.models import OrderBookSnapshot, OrderLevel, Trade


def make_snapshot(
    market_id: str,
    bids: Sequence[Tuple[str, str]] = (),
    asks: Sequence[Tuple[str, str]] = (),
) -> OrderBookSnapshot:
    """Build a snapshot from (price, quantity) pairs."""
    return OrderBookSnapshot(
        market_id=market_id,
        bids=[OrderLevel(price=p, quantity=q) for p, q in bids],
        asks=[OrderLevel(price=p, quantity=q) for p, q in asks],
    )


def make_trades(*rows: Tuple[str, str, Optional[str]]) -> List[Trade]:
    """Build trades from (price, quantity, side) rows, newest first."""
    return [Trade(price=p, quantity=q, execution_side=side) for p, q, side in rows]


def price_series(prices: Sequence[str], side: str = "buy") -> List[Trade]:
    """Unit-quantity trades at the given prices, newest first."""
    return [Trade(price=p, quantity="1", execution_side=side) for p in prices]


class FakeMarketDataProvider(MarketDataProvider):
    """In-memory provider counting fetches per market."""

    def __init__(self) -> None:
        self.orderbooks: Dict[str, OrderBookSnapshot] = {}
        self.trades: Dict[str, List[Trade]] = {}
        self.failing: Set[str] = set()
        self.orderbook_calls: Dict[str, int] = defaultdict(int)
        self.trade_calls: Dict[str, int] = defaultdict(int)
        self.trade_limits: List[int] = []
        self.closed = False

    async def fetch_orderbook(self, market_id: str) -> OrderBookSnapshot:
        self.orderbook_calls[market_id] += 1
        if market_id in self.failing:
            raise DataUnavailableError(market_id, "orderbook fetch failed")
        return self.orderbooks.get(market_id, OrderBookSnapshot(market_id=market_id))

    async def fetch_trades(self, market_id: str, limit: int) -> List[Trade]:
        self.trade_calls[market_id] += 1
        self.trade_limits.append(limit)
        if market_id in self.failing:
            raise DataUnavailableError(market_id, "trades fetch failed")
        return list(self.trades.get(market_id, []))[:limit]

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCacheStore(CacheStore):
    """In-memory TTL cache with an injectable clock."""

    def __init__(self, clock: Optional[FakeClock] = None) -> None:
        self.clock = clock or FakeClock()
        self.entries: Dict[str, Tuple[str, float]] = {}
        self.set_calls: List[Tuple[str, int, str]] = []
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise CacheStoreError("read failed")
        entry = self.entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self.entries[key]
            return None
        return value

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        if self.fail_writes:
            raise CacheStoreError("write failed")
        self.set_calls.append((key, ttl_seconds, value))
        self.entries[key] = (value, self.clock() + ttl_seconds)


@pytest.fixture
def provider() -> FakeMarketDataProvider:
    return FakeMarketDataProvider()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> FakeCacheStore:
    return FakeCacheStore(clock)


@pytest.fixture
def basic_snapshot() -> OrderBookSnapshot:
    """Two-level book: bids 100x5, 99x3; asks 101x4, 102x6."""
    return make_snapshot(
        "m1",
        bids=[("100", "5"), ("99", "3")],
        asks=[("101", "4"), ("102", "6")],
    )

