"""
Pydantic models for configuration validation.

All configuration sections are frozen and reject unknown keys so typos in
``analytics.yaml`` fail loudly at startup.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class InjectiveNetwork(str, Enum):
    """Injective network whose exchange indexer serves market data."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"
    LOCAL = "local"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "InjectiveNetwork":
        """
        Resolve a network name, falling back to mainnet.

        Args:
            name: Network name, case-insensitive. Unknown or empty names
                  resolve to mainnet.

        Returns:
            InjectiveNetwork: Resolved network.
        """
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            return cls.MAINNET


class LogFormat(str, Enum):
    """Log output format."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Default indexer REST endpoints per network
INDEXER_ENDPOINTS = {
    InjectiveNetwork.MAINNET: "https://sentry.exchange.grpc-web.injective.network",
    InjectiveNetwork.TESTNET: "https://testnet.sentry.exchange.grpc-web.injective.network",
    InjectiveNetwork.DEVNET: "https://devnet.api.injective.dev",
    InjectiveNetwork.LOCAL: "http://localhost:4444",
}


# =============================================================================
# ANALYTICS CONFIGURATION
# =============================================================================


class AnalyticsConfig(BaseModel):
    """Thresholds and limits for the analytics components."""

    model_config = {"frozen": True, "extra": "forbid"}

    cache_ttl_seconds: int = Field(
        default=30,
        description="Expiry of cached orderbook analyses",
        ge=1,
    )
    default_trade_limit: int = Field(
        default=50,
        description="Trades fetched per market when the caller gives no limit",
        ge=1,
    )
    max_trade_limit: int = Field(
        default=200,
        description="Upper bound on trades fetched per market",
        ge=1,
        le=1000,
    )
    whale_threshold_ratio: Decimal = Field(
        default=Decimal("0.05"),
        description="Fraction of the larger side's volume that makes an order a whale",
        gt=Decimal("0"),
        le=Decimal("1"),
    )
    concentration_levels: int = Field(
        default=10,
        description="Top levels per side counted toward liquidity concentration",
        ge=1,
    )
    anomaly_zscore: Decimal = Field(
        default=Decimal("2"),
        description="Absolute volume z-score flagged as anomalous",
        gt=Decimal("0"),
    )
    unusual_imbalance: Decimal = Field(
        default=Decimal("0.35"),
        description="Absolute buy/sell imbalance flagged as unusual",
        ge=Decimal("0"),
        le=Decimal("1"),
    )

    @field_validator("whale_threshold_ratio", "anomaly_zscore", "unusual_imbalance", mode="before")
    @classmethod
    def coerce_decimal(cls, v: Any) -> Decimal:
        """Convert YAML floats to Decimal without binary rounding."""
        if isinstance(v, (int, float)):
            return Decimal(str(v))
        return v

    @model_validator(mode="after")
    def validate_limits(self) -> "AnalyticsConfig":
        """Ensure the default trade limit does not exceed the maximum."""
        if self.default_trade_limit > self.max_trade_limit:
            raise ValueError(
                f"default_trade_limit ({self.default_trade_limit}) must be <= "
                f"max_trade_limit ({self.max_trade_limit})"
            )
        return self


# =============================================================================
# CONNECTION CONFIGURATION
# =============================================================================


class IndexerConfig(BaseModel):
    """Exchange indexer REST connection configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    network: InjectiveNetwork = Field(
        default=InjectiveNetwork.MAINNET,
        description="Injective network",
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Override for the network's default indexer URL",
    )
    orderbook_path: str = Field(
        default="/api/exchange/spot/v2/orderbook/{market_id}",
        description="Orderbook endpoint path, formatted with market_id",
    )
    trades_path: str = Field(
        default="/api/exchange/spot/v1/trades",
        description="Trades endpoint path",
    )
    timeout_seconds: int = Field(
        default=10,
        description="Total request timeout in seconds",
        ge=1,
        le=120,
    )

    @field_validator("network", mode="before")
    @classmethod
    def coerce_network(cls, v: Any) -> InjectiveNetwork:
        """Resolve network names leniently, unknown names meaning mainnet."""
        if isinstance(v, InjectiveNetwork):
            return v
        return InjectiveNetwork.from_name(v)

    @property
    def resolved_base_url(self) -> str:
        """Configured base URL, or the network's default."""
        return (self.base_url or INDEXER_ENDPOINTS[self.network]).rstrip("/")


class RedisConnectionConfig(BaseModel):
    """Redis connection configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL",
    )
    db: int = Field(
        default=0,
        description="Redis database number",
        ge=0,
    )
    max_connections: int = Field(
        default=10,
        description="Maximum connection pool size",
        ge=1,
    )
    socket_timeout: int = Field(
        default=5,
        description="Socket timeout in seconds",
        ge=1,
    )


# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================


class ApiConfig(BaseModel):
    """HTTP API configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    host: str = Field(
        default="0.0.0.0",
        description="Bind address",
    )
    port: int = Field(
        default=3000,
        description="Listen port",
        ge=1,
        le=65535,
    )
    tier_header: str = Field(
        default="X-Identity-Tier",
        description="Header carrying the caller's identity tier, set by the gateway",
        min_length=1,
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Default log level",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper()
        return v


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class AppConfig(BaseModel):
    """
    Root application configuration.

    Every section has defaults, so ``AppConfig()`` is a complete local
    development configuration.

    Example:
        >>> config = AppConfig()
        >>> config.analytics.cache_ttl_seconds
        30
        >>> config.indexer.resolved_base_url
        'https://sentry.exchange.grpc-web.injective.network'
    """

    model_config = {"frozen": True, "extra": "forbid"}

    analytics: AnalyticsConfig = Field(
        default_factory=AnalyticsConfig,
        description="Analytics thresholds and limits",
    )
    indexer: IndexerConfig = Field(
        default_factory=IndexerConfig,
        description="Market data indexer connection",
    )
    redis: RedisConnectionConfig = Field(
        default_factory=RedisConnectionConfig,
        description="Redis connection config",
    )
    api: ApiConfig = Field(
        default_factory=ApiConfig,
        description="HTTP API config",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging config",
    )
