"""
Orderbook analysis result models.

These are the derived, cacheable outputs of the orderbook analyzer. Numeric
statistics are plain floats so they serialize as JSON numbers and survive a
cache round trip unchanged. Whale order price and quantity keep the
provider's decimal precision and serialize as decimal strings.

Models:
    WhaleOrder: Resting order at or above the whale threshold
    SpreadAnalysis: Top-of-book spread statistics
    DepthMetrics: Side totals and top-level share
    OrderbookAnalysis: Complete analysis for one market
"""

from decimal import Decimal
from typing import List

from pydantic import Field, field_serializer

from market_analytics.models.base import ResultModel
from market_analytics.models.trade import TradeSide


class WhaleOrder(ResultModel):
    """
    Resting order whose quantity meets the whale threshold.

    Attributes:
        price: Level price.
        quantity: Level quantity.
        side: "buy" for bid levels, "sell" for ask levels.
        is_whale: Always True for orders kept in an analysis.
    """

    price: Decimal
    quantity: Decimal
    side: TradeSide
    is_whale: bool = True

    @field_serializer("price", "quantity")
    def serialize_plain_decimal(self, value: Decimal) -> str:
        """Fixed-point text, never scientific notation (1E-7 -> "0.0000001")."""
        return format(value, "f")


class SpreadAnalysis(ResultModel):
    """
    Top-of-book spread statistics.

    Attributes:
        bid_ask_spread: best_ask - best_bid.
        spread_percentage: spread / mid_price * 100, 0 when mid is not positive.
        mid_price: (best_bid + best_ask) / 2.
    """

    bid_ask_spread: float
    spread_percentage: float
    mid_price: float


class DepthMetrics(ResultModel):
    """
    Per-side depth totals and top-of-book share.

    Attributes:
        bid1_percent: Best bid quantity as a fraction of total bid volume.
        ask1_percent: Best ask quantity as a fraction of total ask volume.
        total_bid_volume: Sum of all bid quantities.
        total_ask_volume: Sum of all ask quantities.
    """

    bid1_percent: float
    ask1_percent: float
    total_bid_volume: float
    total_ask_volume: float


class OrderbookAnalysis(ResultModel):
    """
    Orderbook analysis for one market.

    ``liquidity_concentration`` is the share of total resting volume sitting
    in the top levels of both sides. It is a plain volume ratio and not a
    squared-share Herfindahl index.

    Example:
        >>> analysis.to_json()
        '{"marketId":"0xabc","liquidityConcentration":1.0,...}'
    """

    market_id: str
    liquidity_concentration: float = Field(..., ge=0.0, le=1.0)
    whale_orders: List[WhaleOrder] = Field(default_factory=list)
    spread_analysis: SpreadAnalysis
    depth_metrics: DepthMetrics
