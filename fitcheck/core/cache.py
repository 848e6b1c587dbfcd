import json
import logging
from typing import Any, Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class CacheService:
    """JSON cache over an async Redis client, namespaced by *prefix*.

    With no client (Redis unavailable) every read misses and every write
    is dropped, so callers never need to check for ``None``.
    """

    def __init__(
        self,
        redis_client: Optional[Redis] = None,
        prefix: str = "fitcheck",
        default_ttl: Optional[int] = None,
    ) -> None:
        self._redis = redis_client
        self._prefix = prefix
        self._default_ttl = default_ttl

    @property
    def is_available(self) -> bool:
        return self._redis is not None

    def key(self, *parts: str) -> str:
        return ":".join([self._prefix, *parts])

    async def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        if self._redis is None:
            return None
        try:
            raw = await self._redis.get(key)
        except (RedisError, OSError):
            logger.warning("Cache read failed for %s", key)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding malformed cache entry %s", key)
            return None

    async def set_json(
        self, key: str, data: Dict[str, Any], ttl: Optional[int] = None
    ) -> None:
        if self._redis is None:
            return
        ttl = ttl or self._default_ttl
        try:
            payload = json.dumps(data, default=str)
            if ttl:
                await self._redis.setex(key, ttl, payload)
            else:
                await self._redis.set(key, payload)
        except (TypeError, ValueError):
            logger.warning("Could not serialise cache entry %s", key)
        except (RedisError, OSError):
            logger.warning("Cache write failed for %s", key)

    async def delete(self, key: str) -> None:
        if self._redis is None:
            return
        try:
            await self._redis.delete(key)
        except (RedisError, OSError):
            logger.warning("Cache delete failed for %s", key)

    # Enriched company profiles, one entry per domain

    async def get_enriched_company(self, domain: str) -> Optional[Dict[str, Any]]:
        return await self.get_json(self.key("enrichment", domain))

    async def set_enriched_company(
        self, domain: str, data: Dict[str, Any], ttl: Optional[int] = None
    ) -> None:
        await self.set_json(self.key("enrichment", domain), data, ttl=ttl)
