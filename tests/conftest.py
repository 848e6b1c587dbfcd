import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import TYPE_CHECKING, AsyncGenerator
from unittest.mock import AsyncMock

if TYPE_CHECKING:
    from fitcheck.core.cache import CacheService

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fitcheck.core.rate_limit import limiter
from fitcheck.main import app

# Endpoint tests share one client address; limits are exercised separately.
limiter.enabled = False


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Yield an ``httpx.AsyncClient`` wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Return an ``AsyncMock`` that behaves like ``redis.asyncio.Redis``."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    redis.ping = AsyncMock()
    return redis


@pytest.fixture
def mock_cache(mock_redis) -> "CacheService":
    """Return a ``CacheService`` backed by the mock Redis client."""
    from fitcheck.core.cache import CacheService

    return CacheService(redis_client=mock_redis, default_ttl=3600)


def _make_row(**fields) -> SimpleNamespace:
    now = datetime.now(timezone.utc)
    defaults = {"id": uuid.uuid4(), "created_at": now, "updated_at": now}
    defaults.update(fields)
    return SimpleNamespace(**defaults)


@pytest.fixture
def make_row():
    """Factory for ORM-row stand-ins with an id and timestamps filled in."""
    return _make_row
