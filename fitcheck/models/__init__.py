from fitcheck.models.base import Base
from fitcheck.models.scoring_rule import ScoringRule, ScoringSettings
from fitcheck.models.engagement import (
    EngagementEvent,
    EngagementSettings,
    EngagementType,
)
from fitcheck.models.intent import FirstPartySignal, IntentSettings, ThirdPartySignal
from fitcheck.models.negative import (
    DisqualifiedLead,
    NegativeScoringRule,
    NegativeScoringSettings,
)
from fitcheck.models.predictive import (
    HistoricalDeal,
    PredictiveModelState,
    PredictiveSettings,
)

__all__ = [
    "Base",
    "ScoringRule",
    "ScoringSettings",
    "EngagementSettings",
    "EngagementType",
    "EngagementEvent",
    "IntentSettings",
    "FirstPartySignal",
    "ThirdPartySignal",
    "NegativeScoringSettings",
    "NegativeScoringRule",
    "DisqualifiedLead",
    "HistoricalDeal",
    "PredictiveSettings",
    "PredictiveModelState",
]
