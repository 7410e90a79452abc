"""
Directional signal generation from trade flow and orderbook state.

Combines a market's orderbook analysis with its recent trades into a
buy/sell/hold call with confidence, risk and price targets.

Key Formulas:
    momentum = (last_price - first_price) / first_price
    imbalance = (buy_volume - sell_volume) / total_volume
    confidence = clamp01(|momentum| * 10 + |imbalance|)
    risk_score = clamp01(spread_percentage / 2 + liquidity_concentration) * 100
    exit (buy) = entry * (1 + max(momentum, 0.01))
    exit (sell, hold) = entry * (1 - max(-momentum, 0.01))

Classes:
    SignalGenerator: Signal generation for a single market
"""

import asyncio
from decimal import Decimal
from typing import List

import structlog

from market_analytics.analytics.orderbook import OrderbookAnalyzer
from market_analytics.interfaces.market_data import MarketDataProvider
from market_analytics.metrics.statistics import clamp01
from market_analytics.metrics.trade_flow import TradeFlow
from market_analytics.models.numeric import ZERO, finite_float
from market_analytics.models.orderbook_analysis import OrderbookAnalysis
from market_analytics.models.signal import Signal, SignalAction


logger = structlog.get_logger(__name__)


class SignalGenerator:
    """
    Generator of directional trading signals.

    The orderbook analysis (possibly served from cache) and the trade window
    are fetched concurrently.

    A ``buy`` needs positive momentum, buy-side dominance and a spread under
    0.5%; ``sell`` mirrors it. Everything else is ``hold``. Non-buy signals
    share the downside exit formula.

    Example:
        >>> generator = SignalGenerator(provider, OrderbookAnalyzer(provider, cache))
        >>> signal = await generator.generate("0xabc", trade_limit=100)
        >>> signal.signal, signal.reasons
        (<SignalAction.HOLD: 'hold'>, ['tight spread'])
    """

    DEFAULT_TRADE_LIMIT = 50

    MOMENTUM_THRESHOLD = Decimal("0.005")
    IMBALANCE_THRESHOLD = Decimal("0.1")
    TIGHT_SPREAD_PCT = Decimal("0.3")
    WIDE_SPREAD_PCT = Decimal("1.0")
    MAX_ENTRY_SPREAD_PCT = Decimal("0.5")
    MOMENTUM_CONFIDENCE_WEIGHT = Decimal("10")
    MIN_EXIT_MOVE = Decimal("0.01")

    def __init__(
        self,
        provider: MarketDataProvider,
        orderbook_analyzer: OrderbookAnalyzer,
        max_trade_limit: int = 200,
    ) -> None:
        self.provider = provider
        self.orderbook_analyzer = orderbook_analyzer
        self.max_trade_limit = max_trade_limit

    async def generate(self, market_id: str, trade_limit: int = DEFAULT_TRADE_LIMIT) -> Signal:
        """
        Generate a signal for a market.

        Args:
            market_id: Market identifier.
            trade_limit: Trades to fetch, clamped to [1, max_trade_limit].

        Returns:
            Signal: Directional signal.

        Raises:
            DataUnavailableError: If the orderbook or trades cannot be fetched.
        """
        limit = max(1, min(trade_limit, self.max_trade_limit))

        orderbook, trades = await asyncio.gather(
            self.orderbook_analyzer.analyze(market_id),
            self.provider.fetch_trades(market_id, limit),
        )

        signal = self.evaluate(market_id, orderbook, TradeFlow.from_trades(trades[:limit]))
        logger.info(
            "signal_generated",
            market_id=market_id,
            signal=signal.signal.value,
            confidence=signal.confidence,
            risk_score=signal.risk_score,
        )
        return signal

    def evaluate(self, market_id: str, orderbook: OrderbookAnalysis, flow: TradeFlow) -> Signal:
        """
        Classify already-fetched inputs into a signal.

        Args:
            market_id: Market identifier.
            orderbook: Orderbook analysis for the market.
            flow: Aggregated newest-first trade window.

        Returns:
            Signal: Directional signal.
        """
        momentum = flow.momentum
        imbalance = flow.imbalance
        spread_pct = Decimal(str(orderbook.spread_analysis.spread_percentage))
        concentration = Decimal(str(orderbook.liquidity_concentration))

        reasons = self._reasons(momentum, imbalance, spread_pct)

        action = SignalAction.HOLD
        if (
            momentum > self.MOMENTUM_THRESHOLD
            and imbalance > self.IMBALANCE_THRESHOLD
            and spread_pct < self.MAX_ENTRY_SPREAD_PCT
        ):
            action = SignalAction.BUY
        elif (
            momentum < -self.MOMENTUM_THRESHOLD
            and imbalance < -self.IMBALANCE_THRESHOLD
            and spread_pct < self.MAX_ENTRY_SPREAD_PCT
        ):
            action = SignalAction.SELL

        confidence = clamp01(abs(momentum) * self.MOMENTUM_CONFIDENCE_WEIGHT + abs(imbalance))
        risk_score = clamp01(spread_pct / Decimal("2") + concentration) * Decimal("100")

        entry_price = flow.last_price
        if entry_price == ZERO:
            entry_price = Decimal(str(orderbook.spread_analysis.mid_price))

        if action is SignalAction.BUY:
            exit_price = entry_price * (Decimal("1") + max(momentum, self.MIN_EXIT_MOVE))
        else:
            exit_price = entry_price * (Decimal("1") - max(-momentum, self.MIN_EXIT_MOVE))

        return Signal(
            market_id=market_id,
            signal=action,
            confidence=finite_float(confidence),
            risk_score=finite_float(risk_score),
            entry_price=finite_float(entry_price),
            exit_price=finite_float(exit_price),
            reasons=reasons,
        )

    def _reasons(self, momentum: Decimal, imbalance: Decimal, spread_pct: Decimal) -> List[str]:
        reasons: List[str] = []
        if momentum > self.MOMENTUM_THRESHOLD:
            reasons.append("positive momentum")
        if momentum < -self.MOMENTUM_THRESHOLD:
            reasons.append("negative momentum")
        if imbalance > self.IMBALANCE_THRESHOLD:
            reasons.append("buy-side dominance")
        if imbalance < -self.IMBALANCE_THRESHOLD:
            reasons.append("sell-side dominance")
        if spread_pct < self.TIGHT_SPREAD_PCT:
            reasons.append("tight spread")
        if spread_pct > self.WIDE_SPREAD_PCT:
            reasons.append("wide spread")
        return reasons

    def __repr__(self) -> str:
        return f"SignalGenerator(max_trade_limit={self.max_trade_limit})"
