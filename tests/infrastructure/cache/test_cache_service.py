"""Tests for Redis cache service"""

import json
from unittest.mock import AsyncMock, patch

import pytest
import redis.asyncio as redis

from src.infrastructure.cache.redis_cache import (CacheService,
                                                  permissions_cache_key)


@pytest.fixture
async def cache_service():
    """Create cache service with mock Redis client"""
    service = CacheService()
    service.redis = AsyncMock()
    service._connected = True
    return service


@pytest.fixture
async def disconnected_cache():
    """Create disconnected cache service"""
    service = CacheService()
    service.redis = None
    service._connected = False
    return service


def test_permissions_cache_key():
    assert permissions_cache_key("user-1") == "permissions:user-1"


@pytest.mark.asyncio
async def test_cache_get_hit(cache_service):
    """Test cache get when key exists"""
    cache_service.redis.get = AsyncMock(
        return_value='{"admin": false, "permissions": ["places:read"]}'
    )

    result = await cache_service.get("permissions:user-1")

    assert result == {"admin": False, "permissions": ["places:read"]}
    cache_service.redis.get.assert_called_once_with("permissions:user-1")


@pytest.mark.asyncio
async def test_cache_get_miss(cache_service):
    """Test cache get when key doesn't exist"""
    cache_service.redis.get = AsyncMock(return_value=None)

    result = await cache_service.get("missing_key")

    assert result is None
    cache_service.redis.get.assert_called_once_with("missing_key")


@pytest.mark.asyncio
async def test_cache_set_success(cache_service):
    """Test successful cache set"""
    cache_service.redis.setex = AsyncMock()

    data = {"admin": True, "permissions": []}
    result = await cache_service.set("permissions:user-2", data, ttl=120)

    assert result is True
    key, ttl, payload = cache_service.redis.setex.call_args[0]
    assert key == "permissions:user-2"
    assert ttl == 120
    assert json.loads(payload) == data


@pytest.mark.asyncio
async def test_cache_set_default_ttl(cache_service):
    cache_service.redis.setex = AsyncMock()

    await cache_service.set("key1", {"data": 1})

    assert cache_service.redis.setex.call_args[0][1] == 300


@pytest.mark.asyncio
async def test_cache_delete_success(cache_service):
    """Test successful cache delete"""
    cache_service.redis.delete = AsyncMock()

    result = await cache_service.delete("permissions:user-1")

    assert result is True
    cache_service.redis.delete.assert_called_once_with("permissions:user-1")


@pytest.mark.asyncio
async def test_cache_delete_pattern(cache_service):
    """Test delete pattern (wildcard deletion)"""

    async def mock_scan_iter(match=None):
        for key in ["permissions:user-1", "permissions:user-2", "permissions:user-3"]:
            yield key

    cache_service.redis.scan_iter = mock_scan_iter
    cache_service.redis.delete = AsyncMock()

    deleted_count = await cache_service.delete_pattern("permissions:*")

    assert deleted_count == 3
    assert cache_service.redis.delete.call_count == 3


@pytest.mark.asyncio
async def test_cache_unavailable_returns_none(disconnected_cache):
    """Test that unavailable cache returns None for get"""
    assert await disconnected_cache.get("any_key") is None


@pytest.mark.asyncio
async def test_cache_unavailable_writes_are_noops(disconnected_cache):
    assert await disconnected_cache.set("any_key", {"data": "value"}) is False
    assert await disconnected_cache.delete("any_key") is False
    assert await disconnected_cache.delete_pattern("permissions:*") == 0


@pytest.mark.asyncio
async def test_cache_is_available(cache_service, disconnected_cache):
    """Test cache availability check"""
    assert cache_service.is_available() is True
    assert disconnected_cache.is_available() is False


@pytest.mark.asyncio
async def test_cache_connect_success():
    """Test successful cache connection"""
    with patch("redis.asyncio.Redis") as mock_redis_class:
        mock_client = AsyncMock()
        mock_client.ping = AsyncMock()
        mock_redis_class.return_value = mock_client

        cache = CacheService()
        await cache.connect()

        assert cache.is_available() is True
        mock_client.ping.assert_called_once()


@pytest.mark.asyncio
async def test_cache_connect_failure():
    """Test cache connection failure"""
    with patch("redis.asyncio.Redis") as mock_redis_class:
        mock_client = AsyncMock()
        mock_client.ping = AsyncMock(side_effect=redis.ConnectionError("Connection refused"))
        mock_redis_class.return_value = mock_client

        cache = CacheService()
        await cache.connect()

        # Should gracefully handle failure
        assert cache.is_available() is False
        assert cache.redis is None


@pytest.mark.asyncio
async def test_cache_disconnect(cache_service):
    """Test cache disconnection"""
    client = cache_service.redis
    client.aclose = AsyncMock()

    await cache_service.disconnect()

    client.aclose.assert_called_once()
    assert cache_service.is_available() is False


@pytest.mark.asyncio
async def test_cache_error_handling_on_get(cache_service):
    """Redis errors degrade to a cache miss"""
    cache_service.redis.get = AsyncMock(side_effect=redis.RedisError("Redis error"))

    assert await cache_service.get("test_key") is None


@pytest.mark.asyncio
async def test_cache_error_handling_on_set(cache_service):
    cache_service.redis.setex = AsyncMock(side_effect=redis.RedisError("Redis error"))

    assert await cache_service.set("test_key", {"data": "value"}) is False
