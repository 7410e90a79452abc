"""
Analytics API endpoints.

Provides:
    GET /health                                   - Liveness probe
    GET /api/v1/analytics/advanced-orderbook      - Orderbook analysis (nftHolder)
    GET /api/v1/analytics/market-intelligence     - Cross-market intelligence (premium)
    GET /api/v1/analytics/personalized-signals    - Trading signal (nftHolder)
"""

import time
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from market_analytics.analytics import (
    MarketIntelligenceAnalyzer,
    OrderbookAnalyzer,
    SignalGenerator,
)
from market_analytics.api.tiers import IdentityTier, require_tier
from market_analytics.config.models import AnalyticsConfig
from market_analytics.models import MarketIntelligence, OrderbookAnalysis, Signal

logger = structlog.get_logger(__name__)

router = APIRouter()


def parse_limit(raw: Optional[str], default: int, maximum: int) -> int:
    """
    Parse a ``limit`` query value.

    Non-integers and zero fall back to ``default``; values are capped at
    ``maximum``.
    """
    try:
        value = int(raw) if raw is not None else 0
    except ValueError:
        value = 0
    if value == 0:
        value = default
    return min(value, maximum)


def parse_market_ids(raw: str) -> List[str]:
    """Split a comma-separated id list, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def get_analytics_config(request: Request) -> AnalyticsConfig:
    return request.app.state.config.analytics


def get_orderbook_analyzer(request: Request) -> OrderbookAnalyzer:
    return request.app.state.orderbook_analyzer


def get_intelligence_analyzer(request: Request) -> MarketIntelligenceAnalyzer:
    return request.app.state.intelligence_analyzer


def get_signal_generator(request: Request) -> SignalGenerator:
    return request.app.state.signal_generator


@router.get("/health", tags=["Health"])
async def health() -> Dict[str, Any]:
    """Liveness probe with a millisecond epoch timestamp."""
    return {"status": "ok", "timestamp": int(time.time() * 1000)}


@router.get(
    "/api/v1/analytics/advanced-orderbook",
    response_model=OrderbookAnalysis,
    tags=["Analytics"],
    summary="Advanced orderbook analysis",
    dependencies=[Depends(require_tier(IdentityTier.NFT_HOLDER))],
)
async def advanced_orderbook(
    market_id: Optional[str] = Query(None, alias="marketId"),
    analyzer: OrderbookAnalyzer = Depends(get_orderbook_analyzer),
) -> OrderbookAnalysis:
    if not market_id or not market_id.strip():
        raise HTTPException(status_code=400, detail="marketId required")

    return await analyzer.analyze(market_id.strip())


@router.get(
    "/api/v1/analytics/market-intelligence",
    response_model=MarketIntelligence,
    tags=["Analytics"],
    summary="Cross-market intelligence",
    dependencies=[Depends(require_tier(IdentityTier.PREMIUM))],
)
async def market_intelligence(
    market_ids: Optional[str] = Query(None, alias="marketIds"),
    limit: Optional[str] = Query(None),
    analyzer: MarketIntelligenceAnalyzer = Depends(get_intelligence_analyzer),
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> MarketIntelligence:
    """
    Analyze several markets together.

    Args:
        market_ids: Comma-separated market identifiers.
        limit: Trades per market.
    """
    if market_ids is None or not market_ids.strip():
        raise HTTPException(status_code=400, detail="marketIds required (comma-separated)")

    ids = parse_market_ids(market_ids)
    if not ids:
        raise HTTPException(status_code=400, detail="No valid marketIds provided")

    trade_limit = parse_limit(limit, config.default_trade_limit, config.max_trade_limit)
    return await analyzer.analyze(ids, trade_limit=trade_limit)


@router.get(
    "/api/v1/analytics/personalized-signals",
    response_model=Signal,
    tags=["Analytics"],
    summary="Trading signal for a market",
    dependencies=[Depends(require_tier(IdentityTier.NFT_HOLDER))],
)
async def personalized_signals(
    market_id: Optional[str] = Query(None, alias="marketId"),
    limit: Optional[str] = Query(None),
    generator: SignalGenerator = Depends(get_signal_generator),
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> Signal:
    if not market_id or not market_id.strip():
        raise HTTPException(status_code=400, detail="marketId required")

    trade_limit = parse_limit(limit, config.default_trade_limit, config.max_trade_limit)
    return await generator.generate(market_id.strip(), trade_limit=trade_limit)
