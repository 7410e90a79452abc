"""
Configuration management for the analytics service.

This module handles loading and validating configuration from YAML.
All configuration values are validated using Pydantic models to ensure
type safety and catch configuration errors early.

Configuration is loaded from ``config/analytics.yaml``; environment
variables (REDIS_URL, INJ_NETWORK, INDEXER_URL, LOG_LEVEL, PORT) override
the file.

Example:
    >>> from market_analytics.config import load_config
    >>> config = load_config()
    >>> config.analytics.cache_ttl_seconds
    30

Modules:
    loader: Configuration file loading utilities
    models: Pydantic models for configuration validation
"""

from market_analytics.config.loader import ConfigLoadError, ConfigLoader, load_config
from market_analytics.config.models import (
    # Enums
    InjectiveNetwork,
    LogFormat,
    LogLevel,
    # Sections
    AnalyticsConfig,
    ApiConfig,
    IndexerConfig,
    LoggingConfig,
    RedisConnectionConfig,
    # Root config
    AppConfig,
)

__all__: list[str] = [
    # Loader
    "load_config",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "InjectiveNetwork",
    "LogFormat",
    "LogLevel",
    # Sections
    "AnalyticsConfig",
    "IndexerConfig",
    "RedisConnectionConfig",
    "ApiConfig",
    "LoggingConfig",
    # Root config
    "AppConfig",
]
