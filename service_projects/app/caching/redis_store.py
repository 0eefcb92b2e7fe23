"""
Redis-backed key-value store for cached result pages.
"""

from __future__ import annotations

from typing import List, Optional, Union

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.errors import CacheUnavailableError
from shared.logging import get_logger


_DELETE_BATCH_SIZE = 500


class RedisCacheStore:
    """Thin wrapper over an injected Redis client with TTL writes and pattern eviction."""

    def __init__(self, client: redis.Redis):
        self._redis = client
        self.logger = get_logger("projects.cache.redis")

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisCacheStore":
        """Create a store with its own connection pool."""
        client = redis.from_url(
            redis_url,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30,
        )
        return cls(client)

    async def close(self) -> None:
        """Close Redis connections."""
        await self._redis.aclose()

    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored payload, or None when the key is absent."""
        try:
            value = await self._redis.get(key)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Redis read failed: {exc}", {"key": key}) from exc

        if value is None:
            return None
        return value.encode("utf-8") if isinstance(value, str) else value

    async def set(self, key: str, value: Union[bytes, str], ttl_seconds: int) -> bool:
        """Store a payload that expires after ttl_seconds."""
        try:
            result = await self._redis.set(key, value, ex=ttl_seconds)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Redis write failed: {exc}", {"key": key}) from exc

        self.logger.debug("Cached value", key=key, ttl=ttl_seconds)
        return bool(result)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob-style pattern and return how many were removed."""
        deleted = 0
        batch: List[bytes] = []
        try:
            async for key in self._redis.scan_iter(match=pattern, count=_DELETE_BATCH_SIZE):
                batch.append(key)
                if len(batch) >= _DELETE_BATCH_SIZE:
                    deleted += await self._redis.delete(*batch)
                    batch = []
            if batch:
                deleted += await self._redis.delete(*batch)
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Redis pattern delete failed: {exc}", {"pattern": pattern}) from exc

        self.logger.info("Cleared cache pattern", pattern=pattern, keys_count=deleted)
        return deleted

    async def count_pattern(self, pattern: str) -> int:
        """Count keys matching a pattern without deleting them."""
        try:
            return len([key async for key in self._redis.scan_iter(match=pattern, count=_DELETE_BATCH_SIZE)])
        except (RedisError, OSError) as exc:
            raise CacheUnavailableError(f"Redis scan failed: {exc}", {"pattern": pattern}) from exc

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            return bool(await self._redis.ping())
        except (RedisError, OSError) as exc:
            self.logger.error("Redis health check failed", error=str(exc))
            return False
