"""Pydantic schemas package: re-exports for convenience."""

# Common enums
from fitcheck.schemas.common import (
    RuleCategory as RuleCategory,
    ConditionType as ConditionType,
    NegativeConditionType as NegativeConditionType,
    EngagementCategory as EngagementCategory,
    EngagementTemperature as EngagementTemperature,
    FirstPartySignalType as FirstPartySignalType,
    ThirdPartySignalType as ThirdPartySignalType,
    ConfidenceLevel as ConfidenceLevel,
    SignalSource as SignalSource,
    DealOutcome as DealOutcome,
    TrainingStatus as TrainingStatus,
    Impact as Impact,
    Tier as Tier,
    ScoreCategory as ScoreCategory,
    ScoringMode as ScoringMode,
    OutreachTone as OutreachTone,
    ProspectSortField as ProspectSortField,
    SortOrder as SortOrder,
    SuccessResponse as SuccessResponse,
)

# Rule-based scoring
from fitcheck.schemas.scoring_rules import (
    LeadProfile as LeadProfile,
    RuleBasedScoreOut as RuleBasedScoreOut,
    ScoringRuleCreate as ScoringRuleCreate,
    ScoringRuleOut as ScoringRuleOut,
    ScoringRuleUpdate as ScoringRuleUpdate,
)

# Engagement
from fitcheck.schemas.engagement import (
    EngagementEventCreate as EngagementEventCreate,
    EngagementScoreOut as EngagementScoreOut,
)

# Intent
from fitcheck.schemas.intent import (
    FirstPartySignalCreate as FirstPartySignalCreate,
    IntentScoreOut as IntentScoreOut,
    ThirdPartySignalCreate as ThirdPartySignalCreate,
)

# Negative scoring
from fitcheck.schemas.negative import (
    NegativeLeadData as NegativeLeadData,
    NegativeScoreOut as NegativeScoreOut,
)

# Predictive
from fitcheck.schemas.predictive import (
    FeatureWeights as FeatureWeights,
    PredictionResult as PredictionResult,
    PredictiveLeadData as PredictiveLeadData,
)

# Prospects
from fitcheck.schemas.prospect import (
    EnrichedCompany as EnrichedCompany,
    ICPCriteria as ICPCriteria,
    OutreachBlock as OutreachBlock,
    ProspectScore as ProspectScore,
)
