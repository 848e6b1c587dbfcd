import json
from unittest.mock import AsyncMock

import pytest

from fitcheck.core.cache import CacheService


class TestCacheService:
    @pytest.mark.asyncio
    async def test_without_redis_everything_is_a_noop(self):
        cache = CacheService()
        assert cache.is_available is False
        await cache.set_enriched_company("acme.io", {"a": 1})
        assert await cache.get_enriched_company("acme.io") is None

    def test_keys_are_namespaced(self):
        assert CacheService(prefix="test").key("enrichment", "acme.io") == "test:enrichment:acme.io"

    @pytest.mark.asyncio
    async def test_default_ttl(self, mock_cache, mock_redis):
        await mock_cache.set_enriched_company("acme.io", {"company_name": "Acme"})
        mock_redis.setex.assert_awaited_once_with(
            "fitcheck:enrichment:acme.io", 3600, json.dumps({"company_name": "Acme"})
        )

    @pytest.mark.asyncio
    async def test_no_ttl_uses_plain_set(self, mock_redis):
        cache = CacheService(redis_client=mock_redis)
        await cache.set_json("k", {"a": 1})
        mock_redis.set.assert_awaited_once_with("k", '{"a": 1}')
        mock_redis.setex.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cached_company_round_trip(self, mock_cache, mock_redis):
        mock_redis.get = AsyncMock(return_value='{"company_name": "Acme"}')
        assert await mock_cache.get_enriched_company("acme.io") == {"company_name": "Acme"}
        mock_redis.get.assert_awaited_once_with("fitcheck:enrichment:acme.io")

    @pytest.mark.asyncio
    async def test_invalid_json_is_a_miss(self, mock_cache, mock_redis):
        mock_redis.get = AsyncMock(return_value="{broken")
        assert await mock_cache.get_json("k") is None

    @pytest.mark.asyncio
    async def test_redis_errors_are_a_miss(self, mock_cache, mock_redis):
        mock_redis.get = AsyncMock(side_effect=ConnectionError("down"))
        assert await mock_cache.get_json("k") is None
