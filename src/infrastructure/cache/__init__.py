from src.infrastructure.cache.redis_cache import (CacheService,
                                                  permissions_cache_key)

__all__ = ["CacheService", "permissions_cache_key"]
