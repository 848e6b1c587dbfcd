"""Rule-based scoring schemas (rule CRUD, settings, evaluation)."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fitcheck.schemas.common import ConditionType, RuleCategory


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ScoringRuleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    condition_type: ConditionType
    condition_value: str = ""
    points: int = Field(..., ge=-100, le=100)
    category: RuleCategory
    enabled: bool = True
    sort_order: Optional[int] = None


class ScoringRuleUpdate(BaseModel):
    """Partial update; only fields that are sent are written."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    condition_type: Optional[ConditionType] = None
    condition_value: Optional[str] = None
    points: Optional[int] = Field(None, ge=-100, le=100)
    category: Optional[RuleCategory] = None
    enabled: Optional[bool] = None


class RuleReorderRequest(BaseModel):
    rule_ids: List[UUID] = Field(..., min_length=1)


class ScoringSettingsUpdate(BaseModel):
    rule_based_enabled: Optional[bool] = None
    qualification_threshold: Optional[int] = None


class EnrichedFirmographics(BaseModel):
    """Firmographic fields used by rule conditions (subset of enrichment)."""

    company_size: Optional[str] = None
    industry: Optional[str] = None
    funding_stage: Optional[str] = None
    region: Optional[str] = None


class BehavioralSignals(BaseModel):
    visited_pricing_page: bool = False
    visited_product_page: bool = False
    pricing_page_visits: int = Field(0, ge=0)
    blog_engagement_only: bool = False


class LeadProfile(BaseModel):
    """Lead projection evaluated by the rule engine.

    Every field is optional; missing values never raise during
    evaluation, they simply fail to match.
    """

    job_title: Optional[str] = None
    email: Optional[str] = None
    enriched_data: Optional[EnrichedFirmographics] = None
    behavioral_signals: Optional[BehavioralSignals] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ScoringRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    condition_type: ConditionType
    condition_value: str
    points: int
    category: RuleCategory
    sort_order: int
    enabled: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ScoringSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    rule_based_enabled: bool
    qualification_threshold: int


class RuleMatchOut(BaseModel):
    rule: ScoringRuleOut
    matched: bool
    reason: str
    points_label: str


class RuleBasedScoreOut(BaseModel):
    total_points: int
    matched_rules: List[RuleMatchOut]
    is_qualified: bool
    qualification_threshold: int
    qualification_label: str
