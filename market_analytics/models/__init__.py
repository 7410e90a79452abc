"""
Shared Pydantic data models for the analytics engine.

Raw provider records (trades, order levels) are parsed into Decimal at
construction. Derived results serialize with camelCase field names.

Modules:
    numeric: Numeric parsing rule for provider strings
    orderbook: Order book snapshots and price levels
    trade: Trades and trade side
    orderbook_analysis: Orderbook analyzer results
    intelligence: Cross-market intelligence results
    signal: Trading signal results

Example:
    >>> from market_analytics.models import OrderBookSnapshot, OrderLevel, Trade
    >>> from market_analytics.models import OrderbookAnalysis, Signal
"""

from market_analytics.models.numeric import parse_decimal

# Raw market data
from market_analytics.models.orderbook import (
    OrderBookSnapshot,
    OrderLevel,
)
from market_analytics.models.trade import (
    Trade,
    TradeSide,
)

# Results
from market_analytics.models.base import ResultModel
from market_analytics.models.orderbook_analysis import (
    DepthMetrics,
    OrderbookAnalysis,
    SpreadAnalysis,
    WhaleOrder,
)
from market_analytics.models.intelligence import (
    MarketIntelligence,
    MarketStat,
    MarketTradeSummary,
    UnusualActivity,
    VolumeAnomaly,
)
from market_analytics.models.signal import (
    Signal,
    SignalAction,
)

__all__ = [
    "parse_decimal",
    # Market data
    "OrderLevel",
    "OrderBookSnapshot",
    "Trade",
    "TradeSide",
    # Results
    "ResultModel",
    "WhaleOrder",
    "SpreadAnalysis",
    "DepthMetrics",
    "OrderbookAnalysis",
    "MarketStat",
    "MarketTradeSummary",
    "VolumeAnomaly",
    "UnusualActivity",
    "MarketIntelligence",
    "SignalAction",
    "Signal",
]
