"""
Cache store implementations.

Components:
    redis_client: Async Redis implementation of CacheStore
"""

from market_analytics.storage.redis_client import (
    RedisCacheStore,
    RedisClientError,
    RedisConnectionException,
    RedisOperationError,
)

__all__: list[str] = [
    "RedisCacheStore",
    "RedisClientError",
    "RedisConnectionException",
    "RedisOperationError",
]
