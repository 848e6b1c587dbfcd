"""Engagement scoring schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from fitcheck.schemas.common import EngagementCategory, EngagementTemperature


class EngagementSettingsUpdate(BaseModel):
    engagement_enabled: Optional[bool] = None
    decay_period_days: Optional[int] = Field(None, ge=1)
    cold_threshold: Optional[int] = Field(None, ge=0)
    warm_threshold: Optional[int] = Field(None, ge=0)
    hot_threshold: Optional[int] = Field(None, ge=0)


class EngagementSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    engagement_enabled: bool
    decay_period_days: int
    cold_threshold: int
    warm_threshold: int
    hot_threshold: int


class EngagementTypeUpdate(BaseModel):
    current_points: Optional[int] = Field(None, ge=0, le=100)
    enabled: Optional[bool] = None


class EngagementTypeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: EngagementCategory
    default_points: int
    current_points: int
    description: Optional[str] = None
    enabled: bool
    sort_order: int


class EngagementEventCreate(BaseModel):
    lead_id: str = Field(..., min_length=1)
    engagement_type_id: UUID
    points_earned: Optional[int] = Field(None, ge=0, le=100)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    occurred_at: Optional[datetime] = None


class EngagementEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    lead_id: str
    engagement_type_id: UUID
    points_earned: int
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("metadata_", "metadata")
    )
    occurred_at: datetime


class EngagementScoreOut(BaseModel):
    raw_score: int
    decayed_score: int
    temperature: EngagementTemperature
    event_count: int
    last_activity: Optional[datetime] = None


class CategoryBreakdown(BaseModel):
    count: int = 0
    points: int = 0
    decayed_points: int = 0


class EngagementBreakdownOut(BaseModel):
    lead_id: str
    categories: Dict[EngagementCategory, CategoryBreakdown]


class TopEngagedLead(BaseModel):
    lead_id: str
    score: EngagementScoreOut
    recent_events: List[EngagementEventOut]
