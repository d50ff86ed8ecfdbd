"""Redis-backed cache for per-user permission summaries"""
from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from src.infrastructure.config.settings import get_settings

logger = logging.getLogger(__name__)

PERMISSIONS_KEY_PREFIX = "permissions"


def permissions_cache_key(user_id: str) -> str:
    return f"{PERMISSIONS_KEY_PREFIX}:{user_id}"


class CacheService:
    """
    Async Redis cache service with TTL support.

    Every operation degrades to a miss when Redis is unreachable, so callers
    always fall back to the database.
    """

    def __init__(self, redis_client: redis.Redis | None = None):
        """
        Args:
            redis_client: Optional Redis client (for testing/DI)
        """
        self.redis = redis_client
        self.settings = get_settings()
        self._connected = redis_client is not None

    async def connect(self):
        """Establish Redis connection (call on app startup)"""
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=self.settings.redis_password or None,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                f"Redis cache connected: {self.settings.redis_host}:{self.settings.redis_port}"
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(f"Redis connection failed: {e}. Permission cache disabled.")
            self._connected = False
            self.redis = None

    async def disconnect(self):
        """Close Redis connection (call on app shutdown)"""
        if self.redis:
            await self.redis.aclose()
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Check if Redis is connected and available"""
        return self._connected and self.redis is not None

    async def get(self, key: str) -> Any | None:
        """Cached value (deserialized from JSON) or None if not found/unavailable"""
        if not self.is_available() or self.redis is None:
            return None

        try:
            value = await self.redis.get(key)
        except redis.RedisError as e:
            logger.error(f"Cache get error for key {key}: {e}")
            return None
        if value is None:
            logger.debug(f"Cache MISS: {key}")
            return None
        logger.debug(f"Cache HIT: {key}")
        return json.loads(value)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store a JSON-serializable value with a TTL in seconds"""
        if not self.is_available() or self.redis is None:
            return False

        try:
            await self.redis.setex(key, ttl, json.dumps(value))
        except redis.RedisError as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False
        logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
        return True

    async def delete(self, key: str) -> bool:
        if not self.is_available() or self.redis is None:
            return False

        try:
            await self.redis.delete(key)
        except redis.RedisError as e:
            logger.error(f"Cache delete error for key {key}: {e}")
            return False
        logger.debug(f"Cache DELETE: {key}")
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching pattern (e.g., "permissions:*")

        Returns:
            Number of keys deleted
        """
        if not self.is_available() or self.redis is None:
            return 0

        deleted = 0
        try:
            # Cursor-based scan; KEYS would block the server
            async for key in self.redis.scan_iter(match=pattern):
                await self.redis.delete(key)
                deleted += 1
        except redis.RedisError as e:
            logger.error(f"Cache delete pattern error for {pattern}: {e}")
            return deleted

        if deleted > 0:
            logger.info(f"Cache INVALIDATE: {pattern} ({deleted} keys deleted)")
        return deleted
