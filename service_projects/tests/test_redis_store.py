"""
Unit tests for the Redis cache store.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from service_projects.app.caching import RedisCacheStore
from shared.errors import CacheUnavailableError


def _scan_returning(keys):
    async def _scan_iter(match=None, count=None):
        for key in keys:
            yield key
    return _scan_iter


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(side_effect=lambda *keys: len(keys))
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    client.scan_iter = _scan_returning([])
    return client


@pytest.fixture
def store(redis_client):
    return RedisCacheStore(redis_client)


class TestRedisCacheStore:

    @pytest.mark.asyncio
    async def test_get_returns_stored_bytes(self, store, redis_client):
        redis_client.get.return_value = b'{"total":0}'

        assert await store.get("projects:abc") == b'{"total":0}'
        redis_client.get.assert_awaited_once_with("projects:abc")

    @pytest.mark.asyncio
    async def test_get_encodes_decoded_strings(self, store, redis_client):
        redis_client.get.return_value = '{"total":0}'

        assert await store.get("projects:abc") == b'{"total":0}'

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, store):
        assert await store.get("projects:missing") is None

    @pytest.mark.asyncio
    async def test_get_wraps_redis_errors(self, store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("connection refused")

        with pytest.raises(CacheUnavailableError) as exc_info:
            await store.get("projects:abc")

        assert exc_info.value.code == "CACHE_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_set_uses_expiry(self, store, redis_client):
        assert await store.set("projects:abc", b"payload", 600) is True

        redis_client.set.assert_awaited_once_with("projects:abc", b"payload", ex=600)

    @pytest.mark.asyncio
    async def test_set_wraps_redis_errors(self, store, redis_client):
        redis_client.set.side_effect = RedisConnectionError("connection reset")

        with pytest.raises(CacheUnavailableError):
            await store.set("projects:abc", b"payload", 600)

    @pytest.mark.asyncio
    async def test_delete_pattern_removes_matching_keys(self, store, redis_client):
        redis_client.scan_iter = _scan_returning([b"projects:a", b"projects:b", b"projects:c"])

        deleted = await store.delete_pattern("projects:*")

        assert deleted == 3
        redis_client.delete.assert_awaited_once_with(b"projects:a", b"projects:b", b"projects:c")

    @pytest.mark.asyncio
    async def test_delete_pattern_batches_large_keyspaces(self, store, redis_client):
        keys = [f"projects:{index}".encode() for index in range(1200)]
        redis_client.scan_iter = _scan_returning(keys)

        deleted = await store.delete_pattern("projects:*")

        assert deleted == 1200
        assert redis_client.delete.await_count == 3

    @pytest.mark.asyncio
    async def test_delete_pattern_with_no_matches(self, store, redis_client):
        assert await store.delete_pattern("projects:*") == 0
        redis_client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_pattern_wraps_redis_errors(self, store, redis_client):
        redis_client.scan_iter = _scan_returning([b"projects:a"])
        redis_client.delete.side_effect = RedisConnectionError("gone")

        with pytest.raises(CacheUnavailableError):
            await store.delete_pattern("projects:*")

    @pytest.mark.asyncio
    async def test_count_pattern(self, store, redis_client):
        redis_client.scan_iter = _scan_returning([b"projects:a", b"projects:b"])

        assert await store.count_pattern("projects:*") == 2

    @pytest.mark.asyncio
    async def test_health_check(self, store, redis_client):
        assert await store.health_check() is True

        redis_client.ping.side_effect = RedisConnectionError("down")
        assert await store.health_check() is False

    @pytest.mark.asyncio
    async def test_close(self, store, redis_client):
        await store.close()
        redis_client.aclose.assert_awaited_once()
