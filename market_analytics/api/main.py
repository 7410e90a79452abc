"""
Analytics service entry point.

This module configures logging and runs the FastAPI analytics API using
Uvicorn.

Usage:
    market-analytics

    Or:
    python -m market_analytics.api.main

Environment Variables:
    CONFIG_PATH: Directory containing analytics.yaml (default: config)
    REDIS_URL: Redis connection URL
    INJ_NETWORK: Injective network (mainnet, testnet, devnet, local)
    INDEXER_URL: Indexer base URL override
    LOG_LEVEL: Logging level (default: INFO)
    PORT: Port to listen on (default: 3000)
"""

import logging
import sys

import structlog
import uvicorn

from market_analytics.api.app import create_app
from market_analytics.config import load_config
from market_analytics.config.models import LogFormat, LoggingConfig


def setup_logging(config: LoggingConfig) -> None:
    """Configure structured logging for the analytics service."""
    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == LogFormat.CONSOLE
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, config.level.value),
    )

    # Reduce noise from uvicorn access logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def main() -> None:
    """
    Main entry point for the analytics service.

    Loads configuration, configures logging and starts Uvicorn.
    """
    config = load_config()
    setup_logging(config.logging)

    logger = structlog.get_logger(__name__)
    logger.info(
        "analytics_service_starting",
        version="1.0.0",
        python_version=sys.version,
        network=config.indexer.network.value,
    )

    uvicorn.run(
        create_app(config),
        host=config.api.host,
        port=config.api.port,
        log_level=config.logging.level.value.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
