"""API-layer dependency functions.

Re-exports all dependency factories from ``fitcheck.dependencies`` so that
endpoint modules only need to import from ``fitcheck.api.deps``.
"""

from fitcheck.dependencies import (
    # Repository factories
    get_scoring_rule_repo,
    get_engagement_repo,
    get_intent_repo,
    get_negative_repo,
    get_predictive_repo,
    # Service factories
    get_cache_service,
    get_rule_scoring_service,
    get_engagement_service,
    get_intent_service,
    get_signal_logging_service,
    get_negative_service,
    get_predictive_service,
    get_ai_gateway,
    get_firecrawl_client,
    get_prospect_scoring_service,
    get_outreach_service,
    get_enrichment_service,
    get_workspace_dep,
    # Redis
    get_redis_client,
)

__all__ = [
    "get_scoring_rule_repo",
    "get_engagement_repo",
    "get_intent_repo",
    "get_negative_repo",
    "get_predictive_repo",
    "get_cache_service",
    "get_rule_scoring_service",
    "get_engagement_service",
    "get_intent_service",
    "get_signal_logging_service",
    "get_negative_service",
    "get_predictive_service",
    "get_ai_gateway",
    "get_firecrawl_client",
    "get_prospect_scoring_service",
    "get_outreach_service",
    "get_enrichment_service",
    "get_workspace_dep",
    "get_redis_client",
]
