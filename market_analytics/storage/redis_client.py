"""
Async Redis cache store.

Implements the CacheStore interface on Redis. The analytics engine stores
serialized orderbook analyses here under ``orderbook:analysis:{market_id}``
with a short TTL (SETEX).

Example:
    >>> from market_analytics.config.models import RedisConnectionConfig
    >>> from market_analytics.storage.redis_client import RedisCacheStore
    >>>
    >>> store = RedisCacheStore(RedisConnectionConfig(url="redis://localhost:6379"))
    >>> await store.connect()
    >>> await store.set_with_expiry("orderbook:analysis:0xabc", 30, payload)
    >>> await store.get("orderbook:analysis:0xabc")
"""

from __future__ import annotations

from typing import Optional

import structlog
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError

from market_analytics.config.models import RedisConnectionConfig
from market_analytics.interfaces.errors import CacheStoreError
from market_analytics.interfaces.market_data import CacheStore

logger = structlog.get_logger(__name__)


class RedisClientError(CacheStoreError):
    """Base class for Redis cache store failures."""

    pass


class RedisConnectionException(RedisClientError):
    """Redis could not be reached or did not answer PING."""

    pass


class RedisOperationError(RedisClientError):
    """A cache read or write failed, or the store is not connected."""

    pass


class RedisCacheStore(CacheStore):
    """
    Redis-backed cache store.

    Attributes:
        config: Redis connection configuration.
        _pool: Pool owned by the store (None for an injected client).
        _client: Redis client used for GET and SETEX.
        _connected: Set once PING succeeds.

    Example:
        >>> store = RedisCacheStore(RedisConnectionConfig())
        >>> await store.connect()
        >>> try:
        ...     await store.set_with_expiry("key", 30, "value")
        ... finally:
        ...     await store.disconnect()
    """

    def __init__(
        self,
        config: Optional[RedisConnectionConfig] = None,
        client: Optional[Redis] = None,  # type: ignore[type-arg]
    ) -> None:
        """
        Initialize the cache store.

        Args:
            config: Redis connection configuration containing URL, db, and
                    pool settings. Defaults to RedisConnectionConfig().
            client: Pre-built Redis client. When given, connect() only pings
                    it and no pool is created.
        """
        self.config = config or RedisConnectionConfig()
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = client  # type: ignore[type-arg]
        self._connected: bool = False

        logger.info(
            "redis_cache_store_initialized",
            url=self.config.url,
            db=self.config.db,
            max_connections=self.config.max_connections,
        )

    @property
    def is_connected(self) -> bool:
        """True if connected to Redis."""
        return self._connected and self._client is not None

    async def connect(self) -> None:
        """
        Open the pool and verify Redis answers PING.

        Creates a connection pool (unless a client was injected) and verifies
        it with PING.

        Raises:
            RedisConnectionException: If connection fails.
        """
        if self._connected:
            logger.warning("cache_store_already_connected")
            return

        try:
            if self._client is None:
                self._pool = ConnectionPool.from_url(
                    self.config.url,
                    db=self.config.db,
                    max_connections=self.config.max_connections,
                    socket_timeout=self.config.socket_timeout,
                    socket_connect_timeout=self.config.socket_timeout,
                    decode_responses=True,
                )
                self._client = Redis(connection_pool=self._pool)

            await self._client.ping()
            self._connected = True

            logger.info("cache_store_connected", url=self.config.url, db=self.config.db)

        except (RedisConnectionError, RedisTimeoutError, OSError) as e:
            self._connected = False
            logger.error("cache_store_connection_failed", url=self.config.url, error=str(e))
            raise RedisConnectionException(
                f"Failed to connect to Redis at {self.config.url}: {e}"
            ) from e

    async def disconnect(self) -> None:
        """
        Release the client and pool.

        Idempotent; also cleans up after a failed connect().
        """
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.warning("cache_store_close_error", error=str(e))
            finally:
                self._client = None

        if self._pool is not None:
            try:
                await self._pool.aclose()
            except RedisError as e:
                logger.warning("cache_store_pool_close_error", error=str(e))
            finally:
                self._pool = None

        if self._connected:
            logger.info("cache_store_disconnected")
        self._connected = False

    async def close(self) -> None:
        await self.disconnect()

    def _require_connection(self) -> Redis:  # type: ignore[type-arg]
        """
        Return the live client or fail the cache operation.

        Raises:
            RedisOperationError: If not connected.
        """
        if not self._connected or self._client is None:
            raise RedisOperationError("Redis client is not connected")
        return self._client

    async def get(self, key: str) -> Optional[str]:
        """
        Read a cached value.

        Args:
            key: Cache key.

        Returns:
            Optional[str]: Stored value, or None if absent or expired.

        Raises:
            RedisOperationError: If not connected or the operation fails.
        """
        client = self._require_connection()

        try:
            value = await client.get(key)
        except RedisError as e:
            logger.error("cache_store_get_failed", key=key, error=str(e))
            raise RedisOperationError(f"Failed to read {key}: {e}") from e

        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        """
        Write a value with a TTL (SETEX).

        Args:
            key: Cache key.
            ttl_seconds: Time to live in seconds.
            value: Value to store.

        Raises:
            RedisOperationError: If not connected or the operation fails.
        """
        client = self._require_connection()

        try:
            await client.setex(key, ttl_seconds, value)
            logger.debug("cache_store_value_stored", key=key, ttl=ttl_seconds)
        except RedisError as e:
            logger.error("cache_store_set_failed", key=key, error=str(e))
            raise RedisOperationError(f"Failed to store {key}: {e}") from e
