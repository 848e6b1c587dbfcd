"""Predictive scoring schemas."""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fitcheck.schemas.common import (
    ConfidenceLevel,
    DealOutcome,
    Impact,
    SuccessResponse,
    TrainingStatus,
)


class PredictiveSettingsUpdate(BaseModel):
    predictive_enabled: Optional[bool] = None
    min_deals_threshold: Optional[int] = Field(None, ge=1)


class PredictiveSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    predictive_enabled: bool
    min_deals_threshold: int


class FeatureWeights(BaseModel):
    """Per-bucket win rates learned from historical deals."""

    industry: Dict[str, float] = Field(default_factory=dict)
    company_size: Dict[str, float] = Field(default_factory=dict)
    job_title: Dict[str, float] = Field(default_factory=dict)
    source_channel: Dict[str, float] = Field(default_factory=dict)
    funding_stage: Dict[str, float] = Field(default_factory=dict)
    region: Dict[str, float] = Field(default_factory=dict)
    engagement_score_avg: float = 50.0
    engagement_score_weight: float = 0.15
    base_conversion_rate: float = 0.0


class ModelStateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: UUID
    feature_weights: Optional[FeatureWeights] = None
    total_records: int
    won_records: int
    lost_records: int
    accuracy_score: Optional[float] = None
    last_trained_at: Optional[datetime] = None
    training_status: TrainingStatus
    error_message: Optional[str] = None


class HistoricalDealCreate(BaseModel):
    company_name: str = Field(..., min_length=1)
    industry: Optional[str] = None
    company_size: Optional[str] = None
    job_title: Optional[str] = None
    source_channel: Optional[str] = None
    engagement_score: int = Field(0, ge=0, le=100)
    funding_stage: Optional[str] = None
    region: Optional[str] = None
    deal_value: Optional[float] = None
    days_to_close: Optional[int] = None
    outcome: DealOutcome
    closed_at: Optional[datetime] = None


class HistoricalDealOut(HistoricalDealCreate):
    model_config = ConfigDict(from_attributes=True)

    id: UUID


class TrainingResult(SuccessResponse):
    total_records: int
    won_records: int
    lost_records: int
    accuracy: float


class PredictiveLeadData(BaseModel):
    industry: Optional[str] = None
    company_size: Optional[str] = None
    job_title: Optional[str] = None
    source_channel: Optional[str] = None
    funding_stage: Optional[str] = None
    region: Optional[str] = None
    engagement_score: Optional[float] = None


class ScoreFactor(BaseModel):
    factor: str
    impact: Impact
    value: str


class PredictionResult(SuccessResponse):
    score: int
    confidence: ConfidenceLevel
    factors: List[ScoreFactor]
