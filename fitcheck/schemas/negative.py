"""Negative scoring and disqualification schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fitcheck.schemas.common import NegativeConditionType


class NegativeSettingsUpdate(BaseModel):
    negative_enabled: Optional[bool] = None
    disqualification_threshold: Optional[int] = Field(None, le=0)
    subtract_from_other_models: Optional[bool] = None
    auto_disqualify: Optional[bool] = None


class NegativeSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    negative_enabled: bool
    disqualification_threshold: int
    subtract_from_other_models: bool
    auto_disqualify: bool


class NegativeRuleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    condition_type: NegativeConditionType
    condition_value: str = ""
    points: int = Field(..., ge=-100, le=100)
    reason_label: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    enabled: bool = True


class NegativeRuleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    condition_type: Optional[NegativeConditionType] = None
    condition_value: Optional[str] = None
    points: Optional[int] = Field(None, ge=-100, le=100)
    reason_label: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    enabled: Optional[bool] = None


class NegativeRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    condition_type: NegativeConditionType
    condition_value: str
    points: int
    reason_label: str
    description: Optional[str] = None
    enabled: bool
    sort_order: int


class NegativeLeadData(BaseModel):
    """Lead facts checked by negative rules."""

    lead_id: str = Field(..., min_length=1)
    email: Optional[str] = None
    pages_visited: List[str] = Field(default_factory=list)
    is_competitor: bool = False
    is_spam_source: bool = False
    has_fake_data: bool = False


class TriggeredRule(BaseModel):
    rule_id: str
    rule_name: str
    points: int
    reason: str


class NegativeScoreOut(BaseModel):
    total_score: int
    triggered_rules: List[TriggeredRule]
    is_disqualified: bool


class NegativeEvaluationOut(NegativeScoreOut):
    lead_id: str
    persisted: bool = False


class OverrideRequest(BaseModel):
    reason: str = Field(..., min_length=1)
    overridden_by: str = "user"


class DisqualifiedLeadOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    lead_id: str
    total_negative_score: int
    triggered_rules: List[TriggeredRule]
    disqualified_at: datetime
    is_overridden: bool
    override_reason: Optional[str] = None
    overridden_at: Optional[datetime] = None
    overridden_by: Optional[str] = None
