"""
Analytics components.

Components:
    orderbook: OrderbookAnalyzer for depth, spread, concentration and whales
    market_intelligence: MarketIntelligenceAnalyzer for cross-market stats
    signals: SignalGenerator composing orderbook analysis and trade flow
"""

from market_analytics.analytics.market_intelligence import MarketIntelligenceAnalyzer
from market_analytics.analytics.orderbook import OrderbookAnalyzer
from market_analytics.analytics.signals import SignalGenerator

__all__: list[str] = [
    "OrderbookAnalyzer",
    "MarketIntelligenceAnalyzer",
    "SignalGenerator",
]
