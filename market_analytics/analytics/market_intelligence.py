"""
Cross-market intelligence from recent trades.

Fetches a recent trade window for each requested market, derives per-market
trade statistics, then compares the markets with each other: volume
z-scores across the batch, pairwise price correlation, and single-market
flow imbalance.

Key Formulas:
    zscore = (total_volume - mean) / population_std      anomaly iff |z| >= 2
    unusual activity iff |imbalance| >= 0.35, max_trade_notional = avg_size * 5
    correlation = pearson(prices_a[:n], prices_b[:n]), n = min(len) >= 5

Failure policy:
    Fail-fast. Per-market fetches run concurrently; if any market's fetch
    fails, the whole request raises DataUnavailableError for that market and
    no partial result is returned. Fetches still in flight are cancelled.
    The policy is the same for every market.

Classes:
    MarketIntelligenceAnalyzer: Multi-market trade statistics and comparisons
"""

import asyncio
from decimal import Decimal
from typing import Dict, List, Sequence

import structlog

from market_analytics.interfaces.market_data import MarketDataProvider
from market_analytics.metrics.statistics import mean, pearson, population_std, zscore
from market_analytics.metrics.trade_flow import TradeFlow
from market_analytics.models.intelligence import (
    MarketIntelligence,
    MarketStat,
    MarketTradeSummary,
    UnusualActivity,
    VolumeAnomaly,
)
from market_analytics.models.numeric import finite_float

logger = structlog.get_logger(__name__)


class MarketIntelligenceAnalyzer:
    """
    Analyzer for a batch of markets.

    Output order of ``markets`` always matches the order of the requested
    ids, regardless of the order in which concurrent fetches complete.

    Edge Cases Handled:
        - Market with no trades: all stats 0, never flagged
        - All markets with equal volume: std is 0, no anomalies
        - Fewer than 5 aligned prices for a pair: pair omitted
        - Constant price series: correlation 0
        - Empty id list: empty result

    Example:
        >>> analyzer = MarketIntelligenceAnalyzer(provider)
        >>> result = await analyzer.analyze(["0xaaa", "0xbbb"], trade_limit=100)
        >>> result.correlation_metrics.get("0xaaa:0xbbb")

    Attributes:
        provider: Market data provider.
        max_trade_limit: Upper bound on trades fetched per market.
        anomaly_zscore: Absolute z-score at which a market's volume is anomalous.
        unusual_imbalance: Absolute imbalance at which flow is unusual.
        min_correlation_points: Minimum aligned prices for a correlation pair.
    """

    DEFAULT_TRADE_LIMIT = 50
    UNUSUAL_NOTIONAL_MULTIPLIER = Decimal("5")

    def __init__(
        self,
        provider: MarketDataProvider,
        max_trade_limit: int = 200,
        anomaly_zscore: Decimal = Decimal("2"),
        unusual_imbalance: Decimal = Decimal("0.35"),
        min_correlation_points: int = 5,
    ) -> None:
        self.provider = provider
        self.max_trade_limit = max_trade_limit
        self.anomaly_zscore = anomaly_zscore
        self.unusual_imbalance = unusual_imbalance
        self.min_correlation_points = min_correlation_points

    async def analyze(
        self,
        market_ids: Sequence[str],
        trade_limit: int = DEFAULT_TRADE_LIMIT,
    ) -> MarketIntelligence:
        """
        Analyze a batch of markets.

        Args:
            market_ids: Market identifiers, in the order results are reported.
            trade_limit: Trades to fetch per market, clamped to
                [1, max_trade_limit].

        Returns:
            MarketIntelligence: Per-market stats, anomalies, correlations and
                                unusual activity.

        Raises:
            DataUnavailableError: If any market's trades cannot be fetched.
        """
        limit = max(1, min(trade_limit, self.max_trade_limit))

        tasks = [
            asyncio.ensure_future(self._summarize_market(market_id, limit))
            for market_id in market_ids
        ]
        try:
            summaries: List[MarketTradeSummary] = list(await asyncio.gather(*tasks))
        except Exception:
            # Fail-fast: stop sibling fetches and collect their outcomes
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        result = MarketIntelligence(
            markets=[summary.stat for summary in summaries],
            volume_anomalies=self._volume_anomalies(summaries),
            correlation_metrics=self._correlations(summaries),
            unusual_activity=self._unusual_activity(summaries),
        )

        logger.info(
            "market_intelligence_computed",
            markets=len(summaries),
            trade_limit=limit,
            anomalies=len(result.volume_anomalies),
            correlations=len(result.correlation_metrics),
            unusual=len(result.unusual_activity),
        )
        return result

    async def _summarize_market(self, market_id: str, limit: int) -> MarketTradeSummary:
        trades = await self.provider.fetch_trades(market_id, limit)
        return self.summarize(market_id, TradeFlow.from_trades(trades[:limit]))

    @staticmethod
    def summarize(market_id: str, flow: TradeFlow) -> MarketTradeSummary:
        """
        Build the per-market summary from an aggregated trade window.

        Args:
            market_id: Market identifier.
            flow: Aggregated newest-first trade window.

        Returns:
            MarketTradeSummary: Stats plus the price series for correlation.
        """
        stat = MarketStat(
            market_id=market_id,
            trade_count=flow.trade_count,
            total_volume=finite_float(flow.total_volume),
            total_notional=finite_float(flow.total_notional),
            avg_trade_size=finite_float(flow.avg_trade_size),
            buy_sell_imbalance=finite_float(flow.imbalance),
            last_price=finite_float(flow.last_price),
        )
        return MarketTradeSummary(
            stat=stat,
            total_volume=flow.total_volume,
            prices=flow.prices,
        )

    def _volume_anomalies(self, summaries: List[MarketTradeSummary]) -> List[VolumeAnomaly]:
        volumes = [summary.total_volume for summary in summaries]
        volume_mean = mean(volumes)
        volume_std = population_std(volumes, volume_mean)

        anomalies: List[VolumeAnomaly] = []
        for summary in summaries:
            score = zscore(summary.total_volume, volume_mean, volume_std)
            if abs(score) >= self.anomaly_zscore:
                anomalies.append(
                    VolumeAnomaly(
                        market_id=summary.stat.market_id,
                        z_score=finite_float(score),
                        total_volume=finite_float(summary.total_volume),
                    )
                )
        return anomalies

    def _unusual_activity(self, summaries: List[MarketTradeSummary]) -> List[UnusualActivity]:
        unusual: List[UnusualActivity] = []
        for summary in summaries:
            stat = summary.stat
            if abs(stat.buy_sell_imbalance) >= float(self.unusual_imbalance):
                unusual.append(
                    UnusualActivity(
                        market_id=stat.market_id,
                        max_trade_notional=finite_float(
                            stat.avg_trade_size * float(self.UNUSUAL_NOTIONAL_MULTIPLIER)
                        ),
                        buy_sell_imbalance=stat.buy_sell_imbalance,
                    )
                )
        return unusual

    def _correlations(self, summaries: List[MarketTradeSummary]) -> Dict[str, float]:
        correlations: Dict[str, float] = {}
        for i, first in enumerate(summaries):
            for second in summaries[i + 1 :]:
                length = min(len(first.prices), len(second.prices))
                if length < self.min_correlation_points:
                    continue

                key = f"{first.stat.market_id}:{second.stat.market_id}"
                correlations[key] = finite_float(pearson(first.prices[:length], second.prices[:length]))
        return correlations

    def __repr__(self) -> str:
        return (
            f"MarketIntelligenceAnalyzer(max_trade_limit={self.max_trade_limit}, "
            f"anomaly_zscore={self.anomaly_zscore}, unusual_imbalance={self.unusual_imbalance})"
        )
