"""Repository layer: all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the service layer
only contains business logic.
"""

from fitcheck.repositories.scoring_rule_repository import ScoringRuleRepository
from fitcheck.repositories.engagement_repository import EngagementRepository
from fitcheck.repositories.intent_repository import IntentRepository
from fitcheck.repositories.negative_repository import NegativeScoringRepository
from fitcheck.repositories.predictive_repository import PredictiveRepository

__all__ = [
    "ScoringRuleRepository",
    "EngagementRepository",
    "IntentRepository",
    "NegativeScoringRepository",
    "PredictiveRepository",
]
