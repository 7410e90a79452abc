"""
Cross-market intelligence result models.

Models:
    MarketStat: Per-market trade statistics
    MarketTradeSummary: MarketStat plus the price series used for correlation
    VolumeAnomaly: Market whose volume z-score crosses the anomaly threshold
    UnusualActivity: Market with a strongly one-sided trade flow
    MarketIntelligence: Complete multi-market result
"""

from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, Field

from market_analytics.models.base import ResultModel


class MarketStat(ResultModel):
    """
    Trade statistics for one market, recomputed on every call.

    Attributes:
        market_id: Market identifier.
        trade_count: Number of trades in the fetched window.
        total_volume: Sum of trade quantities.
        total_notional: Sum of price * quantity.
        avg_trade_size: total_volume / trade_count, 0 with no trades.
        buy_sell_imbalance: (buy - sell) / total_volume in [-1, 1].
        last_price: Price of the newest trade, 0 with no trades.
    """

    market_id: str
    trade_count: int = Field(..., ge=0)
    total_volume: float
    total_notional: float
    avg_trade_size: float
    buy_sell_imbalance: float = Field(..., ge=-1.0, le=1.0)
    last_price: float


class MarketTradeSummary(BaseModel):
    """
    Per-market intermediate result.

    Carries its own newest-first price series so pairwise correlation can
    be computed in a second pass without a side table keyed by market id.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    stat: MarketStat
    total_volume: Decimal
    prices: List[Decimal] = Field(default_factory=list)


class VolumeAnomaly(ResultModel):
    """Market whose total volume deviates from the batch mean by >= 2 std."""

    market_id: str
    z_score: float
    total_volume: float


class UnusualActivity(ResultModel):
    """
    Market with a strongly one-sided trade flow.

    ``max_trade_notional`` is a heuristic ceiling (avg trade size * 5), not
    an observed trade.
    """

    market_id: str
    max_trade_notional: float
    buy_sell_imbalance: float = Field(..., ge=-1.0, le=1.0)


class MarketIntelligence(ResultModel):
    """
    Multi-market intelligence result.

    ``correlation_metrics`` is keyed by ``"{idA}:{idB}"`` in the caller's
    input order and only holds pairs with at least 5 aligned prices.
    """

    markets: List[MarketStat] = Field(default_factory=list)
    volume_anomalies: List[VolumeAnomaly] = Field(default_factory=list)
    correlation_metrics: Dict[str, float] = Field(default_factory=dict)
    unusual_activity: List[UnusualActivity] = Field(default_factory=list)
