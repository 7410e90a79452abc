"""
FastAPI application for the market analytics service.

This module creates and configures the FastAPI application with:
- Lifespan events wiring the market data provider and Redis cache
- Analyzer instances built from the analytics configuration
- Identity tier gating and JSON error bodies

Services can be injected (tests, embedding); whatever the lifespan creates
itself it also closes on shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from market_analytics.adapters.injective import IndexerMarketDataProvider
from market_analytics.analytics import (
    MarketIntelligenceAnalyzer,
    OrderbookAnalyzer,
    SignalGenerator,
)
from market_analytics.api.routes import router
from market_analytics.api.tiers import TierResolver, header_tier_resolver
from market_analytics.config.models import AppConfig
from market_analytics.interfaces import CacheStore, DataUnavailableError, MarketDataProvider
from market_analytics.storage import RedisCacheStore, RedisConnectionException

logger = structlog.get_logger(__name__)


def build_analyzers(
    app: FastAPI,
    config: AppConfig,
    provider: MarketDataProvider,
    cache: CacheStore,
) -> None:
    """Attach analyzer instances configured from ``config`` to app state."""
    settings = config.analytics

    orderbook_analyzer = OrderbookAnalyzer(
        provider,
        cache,
        cache_ttl_seconds=settings.cache_ttl_seconds,
        whale_threshold_ratio=settings.whale_threshold_ratio,
        concentration_levels=settings.concentration_levels,
    )
    app.state.orderbook_analyzer = orderbook_analyzer
    app.state.intelligence_analyzer = MarketIntelligenceAnalyzer(
        provider,
        max_trade_limit=settings.max_trade_limit,
        anomaly_zscore=settings.anomaly_zscore,
        unusual_imbalance=settings.unusual_imbalance,
    )
    app.state.signal_generator = SignalGenerator(
        provider,
        orderbook_analyzer,
        max_trade_limit=settings.max_trade_limit,
    )


def create_app(
    config: Optional[AppConfig] = None,
    provider: Optional[MarketDataProvider] = None,
    cache: Optional[CacheStore] = None,
    tier_resolver: Optional[TierResolver] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. Defaults to AppConfig().
        provider: Market data provider. Created from ``config.indexer`` when
                  omitted.
        cache: Cache store. A RedisCacheStore is created and connected from
               ``config.redis`` when omitted; if Redis is unreachable the
               service runs uncached.
        tier_resolver: Maps a request to its identity tier. Defaults to
                       reading ``config.api.tier_header``.

    Returns:
        FastAPI: Configured application instance.

    Example:
        >>> app = create_app(load_config())
        >>> uvicorn.run(app, host="0.0.0.0", port=3000)
    """
    config = config or AppConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("analytics_api_starting", network=config.indexer.network.value)

        own_provider: Optional[IndexerMarketDataProvider] = None
        own_cache: Optional[RedisCacheStore] = None

        if provider is None:
            own_provider = IndexerMarketDataProvider(config.indexer)

        if cache is None:
            own_cache = RedisCacheStore(config.redis)
            try:
                await own_cache.connect()
            except RedisConnectionException as e:
                # Calls then fail with RedisOperationError and are served uncached
                logger.warning(
                    "redis_connection_failed",
                    error=str(e),
                    message="Orderbook analyses will not be cached",
                )

        build_analyzers(app, config, provider or own_provider, cache or own_cache)
        logger.info("analytics_api_ready")

        try:
            yield
        finally:
            logger.info("analytics_api_shutting_down")
            if own_cache is not None:
                await own_cache.close()
            if own_provider is not None:
                await own_provider.close()
            logger.info("analytics_api_shutdown_complete")

    app = FastAPI(
        title="Market Microstructure Analytics",
        description="Orderbook analysis, cross-market intelligence and trading signals",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.config = config
    app.state.tier_resolver = tier_resolver or header_tier_resolver(config.api.tier_header)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(DataUnavailableError)
    async def data_unavailable_handler(request: Request, exc: DataUnavailableError) -> JSONResponse:
        logger.warning(
            "market_data_unavailable",
            market_id=exc.market_id,
            path=request.url.path,
            error=str(exc),
        )
        return JSONResponse(
            status_code=503,
            content={"error": str(exc), "retryable": exc.retryable},
        )

    app.include_router(router)

    logger.info("fastapi_app_created")

    return app
