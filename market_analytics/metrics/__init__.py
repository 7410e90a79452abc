"""
Shared statistical helpers for the analytics engine.

Components:
    statistics: mean, population std, z-score, Pearson correlation, clamping
    trade_flow: TradeFlow aggregation of a trade window
"""

from market_analytics.metrics.statistics import (
    clamp,
    clamp01,
    mean,
    pearson,
    population_std,
    safe_ratio,
    zscore,
)
from market_analytics.metrics.trade_flow import TradeFlow

__all__: list[str] = [
    "mean",
    "population_std",
    "zscore",
    "pearson",
    "safe_ratio",
    "clamp",
    "clamp01",
    "TradeFlow",
]
