import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from redis.asyncio import Redis

from fitcheck.core.config import settings
from fitcheck.core.database import get_db

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Redis client factory
# ---------------------------------------------------------------------------


async def get_redis_client() -> Optional[Redis]:
    """Get an async Redis client instance using connection pooling."""
    try:
        client = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
        await client.ping()
        return client
    except Exception:
        logger.warning("Redis unavailable, enrichment caching disabled for this request")
        return None


# ---------------------------------------------------------------------------
# Repository factory functions (one per repository, each gets the shared db)
# ---------------------------------------------------------------------------


async def get_scoring_rule_repo(
    db: AsyncSession = Depends(get_db),
):
    from fitcheck.repositories.scoring_rule_repository import ScoringRuleRepository

    return ScoringRuleRepository(db)


async def get_engagement_repo(
    db: AsyncSession = Depends(get_db),
):
    from fitcheck.repositories.engagement_repository import EngagementRepository

    return EngagementRepository(db)


async def get_intent_repo(
    db: AsyncSession = Depends(get_db),
):
    from fitcheck.repositories.intent_repository import IntentRepository

    return IntentRepository(db)


async def get_negative_repo(
    db: AsyncSession = Depends(get_db),
):
    from fitcheck.repositories.negative_repository import NegativeScoringRepository

    return NegativeScoringRepository(db)


async def get_predictive_repo(
    db: AsyncSession = Depends(get_db),
):
    from fitcheck.repositories.predictive_repository import PredictiveRepository

    return PredictiveRepository(db)


# ---------------------------------------------------------------------------
# Cache service factory
# ---------------------------------------------------------------------------


async def get_cache_service(
    redis_client: Optional[Redis] = Depends(get_redis_client),
):
    """Build a :class:`CacheService` backed by the shared Redis client."""
    from fitcheck.core.cache import CacheService

    return CacheService(
        redis_client=redis_client, default_ttl=settings.ENRICHMENT_CACHE_TTL
    )


# ---------------------------------------------------------------------------
# Lead scoring service factories
# ---------------------------------------------------------------------------


async def get_rule_scoring_service(
    rule_repo=Depends(get_scoring_rule_repo),
):
    from fitcheck.services.rule_scoring import RuleScoringService

    return RuleScoringService(rule_repo=rule_repo)


async def get_engagement_service(
    engagement_repo=Depends(get_engagement_repo),
):
    from fitcheck.services.engagement_scoring import EngagementScoringService

    return EngagementScoringService(engagement_repo=engagement_repo)


async def get_intent_service(
    intent_repo=Depends(get_intent_repo),
):
    from fitcheck.services.intent_scoring import IntentScoringService

    return IntentScoringService(intent_repo=intent_repo)


async def get_signal_logging_service(
    intent_repo=Depends(get_intent_repo),
):
    """Build a :class:`SignalLoggingService` for the tracking ingest path."""
    from fitcheck.services.signal_logging import SignalLoggingService

    return SignalLoggingService(intent_repo=intent_repo)


async def get_negative_service(
    negative_repo=Depends(get_negative_repo),
):
    from fitcheck.services.negative_scoring import NegativeScoringService

    return NegativeScoringService(negative_repo=negative_repo)


async def get_predictive_service(
    predictive_repo=Depends(get_predictive_repo),
):
    from fitcheck.services.predictive_scoring import PredictiveScoringService

    return PredictiveScoringService(predictive_repo=predictive_repo)


# ---------------------------------------------------------------------------
# AI-backed service factories
# ---------------------------------------------------------------------------


async def get_ai_gateway():
    """Build an :class:`AIGatewayClient` from the configured credentials."""
    from fitcheck.services.ai_gateway import AIGatewayClient

    return AIGatewayClient()


async def get_firecrawl_client():
    from fitcheck.services.enrichment import FirecrawlClient

    return FirecrawlClient()


async def get_prospect_scoring_service(
    gateway=Depends(get_ai_gateway),
):
    from fitcheck.services.prospect_scoring import ProspectScoringService

    return ProspectScoringService(gateway=gateway)


async def get_outreach_service(
    gateway=Depends(get_ai_gateway),
):
    from fitcheck.services.outreach import OutreachService

    return OutreachService(gateway=gateway)


async def get_enrichment_service(
    firecrawl=Depends(get_firecrawl_client),
    gateway=Depends(get_ai_gateway),
    cache=Depends(get_cache_service),
):
    """Build an :class:`EnrichmentService` with cache and both HTTP clients."""
    from fitcheck.services.enrichment import EnrichmentService

    return EnrichmentService(firecrawl=firecrawl, gateway=gateway, cache=cache)


async def get_workspace_dep():
    """Return the process-wide prospect workspace."""
    from fitcheck.services.workspace import get_workspace

    return get_workspace()
