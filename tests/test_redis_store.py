"""Tests for the Redis cache store."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from market_analytics.config import RedisConnectionConfig
from market_analytics.interfaces import CacheStoreError
from market_analytics.storage import (
    RedisCacheStore,
    RedisConnectionException,
    RedisOperationError,
)


@pytest.fixture
def redis_mock():
    client = AsyncMock()
    client.ping.return_value = True
    return client


@pytest.fixture
async def store(redis_mock):
    store = RedisCacheStore(RedisConnectionConfig(), client=redis_mock)
    await store.connect()
    return store


class TestConnection:
    async def test_connect_pings(self, store, redis_mock):
        assert store.is_connected
        redis_mock.ping.assert_awaited_once()

    async def test_connect_failure(self, redis_mock):
        redis_mock.ping.side_effect = RedisConnectionError("refused")
        store = RedisCacheStore(client=redis_mock)

        with pytest.raises(RedisConnectionException):
            await store.connect()

        assert not store.is_connected

    async def test_connection_error_is_cache_error(self):
        assert issubclass(RedisConnectionException, CacheStoreError)
        assert issubclass(RedisOperationError, CacheStoreError)

    async def test_disconnect_idempotent(self, store, redis_mock):
        await store.disconnect()
        await store.close()

        redis_mock.aclose.assert_awaited_once()
        assert not store.is_connected

    async def test_use_before_connect(self, redis_mock):
        store = RedisCacheStore(client=redis_mock)

        with pytest.raises(RedisOperationError):
            await store.get("k")


class TestOperations:
    async def test_get(self, store, redis_mock):
        redis_mock.get.return_value = '{"marketId":"m1"}'

        assert await store.get("orderbook:analysis:m1") == '{"marketId":"m1"}'
        redis_mock.get.assert_awaited_once_with("orderbook:analysis:m1")

    async def test_get_missing(self, store, redis_mock):
        redis_mock.get.return_value = None

        assert await store.get("k") is None

    async def test_get_decodes_bytes(self, store, redis_mock):
        redis_mock.get.return_value = b"value"

        assert await store.get("k") == "value"

    async def test_set_with_expiry_uses_setex(self, store, redis_mock):
        await store.set_with_expiry("orderbook:analysis:m1", 30, "payload")

        redis_mock.setex.assert_awaited_once_with("orderbook:analysis:m1", 30, "payload")

    async def test_get_failure(self, store, redis_mock):
        redis_mock.get.side_effect = RedisError("boom")

        with pytest.raises(RedisOperationError):
            await store.get("k")

    async def test_set_failure(self, store, redis_mock):
        redis_mock.setex.side_effect = RedisError("boom")

        with pytest.raises(CacheStoreError):
            await store.set_with_expiry("k", 30, "v")
