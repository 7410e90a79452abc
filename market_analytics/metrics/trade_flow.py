"""
Trade flow aggregation.

Aggregates a newest-first trade window into volume, notional and
buy/sell flow. Used by both the market intelligence analyzer and the
signal generator so the imbalance definition is shared.

Key Formulas:
    total_volume = sum(quantity)
    total_notional = sum(price * quantity)
    avg_trade_size = total_volume / trade_count
    imbalance = (buy_volume - sell_volume) / total_volume
        Range: [-1, 1]
        Positive: buy aggressors dominate
        Negative: sell aggressors dominate

Classes:
    TradeFlow: Aggregated flow for one trade window
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Sequence

from market_analytics.metrics.statistics import ONE, clamp, safe_ratio
from market_analytics.models.numeric import ZERO
from market_analytics.models.trade import Trade


@dataclass(frozen=True)
class TradeFlow:
    """
    Aggregated flow for a newest-first trade window.

    Trades whose side is neither "buy" nor "sell" count toward total volume
    but toward neither buy nor sell volume.

    Attributes:
        trade_count: Number of trades.
        total_volume: Sum of quantities.
        total_notional: Sum of price * quantity.
        buy_volume: Quantity traded with a buy aggressor.
        sell_volume: Quantity traded with a sell aggressor.
        prices: Trade prices, newest first.
    """

    trade_count: int = 0
    total_volume: Decimal = ZERO
    total_notional: Decimal = ZERO
    buy_volume: Decimal = ZERO
    sell_volume: Decimal = ZERO
    prices: List[Decimal] = field(default_factory=list)

    @classmethod
    def from_trades(cls, trades: Sequence[Trade]) -> "TradeFlow":
        """
        Aggregate a trade window.

        Args:
            trades: Trades ordered newest first.

        Returns:
            TradeFlow: Aggregated flow. An empty window yields all zeros.
        """
        total_volume = ZERO
        total_notional = ZERO
        buy_volume = ZERO
        sell_volume = ZERO

        for trade in trades:
            total_volume += trade.quantity
            total_notional += trade.notional
            if trade.is_buy:
                buy_volume += trade.quantity
            elif trade.is_sell:
                sell_volume += trade.quantity

        return cls(
            trade_count=len(trades),
            total_volume=total_volume,
            total_notional=total_notional,
            buy_volume=buy_volume,
            sell_volume=sell_volume,
            prices=[trade.price for trade in trades],
        )

    @property
    def avg_trade_size(self) -> Decimal:
        """Average trade quantity, 0 with no trades."""
        return safe_ratio(self.total_volume, Decimal(self.trade_count))

    @property
    def imbalance(self) -> Decimal:
        """Buy/sell imbalance in [-1, 1], 0 when total volume is 0."""
        return clamp(
            safe_ratio(self.buy_volume - self.sell_volume, self.total_volume),
            -ONE,
            ONE,
        )

    @property
    def last_price(self) -> Decimal:
        """Price of the newest trade, 0 with no trades."""
        return self.prices[0] if self.prices else ZERO

    @property
    def first_price(self) -> Decimal:
        """Price of the oldest trade in the window, 0 with no trades."""
        return self.prices[-1] if self.prices else ZERO

    @property
    def momentum(self) -> Decimal:
        """Relative change from oldest to newest price, 0 if oldest is not positive."""
        if self.first_price <= ZERO:
            return ZERO
        return (self.last_price - self.first_price) / self.first_price
