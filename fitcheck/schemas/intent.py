"""Intent signal schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from fitcheck.schemas.common import (
    ConfidenceLevel,
    FirstPartySignalType,
    SignalSource,
    SuccessResponse,
    ThirdPartySignalType,
)


class IntentSettingsUpdate(BaseModel):
    intent_enabled: Optional[bool] = None
    in_market_threshold: Optional[int] = Field(None, ge=0, le=100)
    first_party_weight: Optional[float] = Field(None, ge=0)
    third_party_weight: Optional[float] = Field(None, ge=0)
    pricing_page_weight: Optional[int] = Field(None, ge=0)
    demo_page_weight: Optional[int] = Field(None, ge=0)
    product_page_weight: Optional[int] = Field(None, ge=0)
    email_open_weight: Optional[int] = Field(None, ge=0)
    email_click_weight: Optional[int] = Field(None, ge=0)
    email_reply_weight: Optional[int] = Field(None, ge=0)
    trial_signup_weight: Optional[int] = Field(None, ge=0)
    g2_research_weight: Optional[int] = Field(None, ge=0)
    trustradius_weight: Optional[int] = Field(None, ge=0)
    competitor_research_weight: Optional[int] = Field(None, ge=0)
    intent_provider_weight: Optional[int] = Field(None, ge=0)


class IntentSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    intent_enabled: bool
    in_market_threshold: int
    first_party_weight: float
    third_party_weight: float
    pricing_page_weight: int
    demo_page_weight: int
    product_page_weight: int
    email_open_weight: int
    email_click_weight: int
    email_reply_weight: int
    trial_signup_weight: int
    g2_research_weight: int
    trustradius_weight: int
    competitor_research_weight: int
    intent_provider_weight: int


class FirstPartySignalCreate(BaseModel):
    lead_id: str = Field(..., min_length=1)
    signal_type: FirstPartySignalType
    page_url: Optional[str] = None
    visit_count: int = Field(1, ge=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    observed_at: Optional[datetime] = None


class ThirdPartySignalCreate(BaseModel):
    lead_id: str = Field(..., min_length=1)
    source_name: str = Field(..., min_length=1)
    signal_type: ThirdPartySignalType
    confidence_level: ConfidenceLevel = ConfidenceLevel.medium
    notes: Optional[str] = None
    observed_at: Optional[datetime] = None


class FirstPartySignalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    lead_id: str
    signal_type: FirstPartySignalType
    page_url: Optional[str] = None
    visit_count: int
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("metadata_", "metadata")
    )
    observed_at: datetime


class ThirdPartySignalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    lead_id: str
    source_name: str
    signal_type: ThirdPartySignalType
    confidence_level: ConfidenceLevel
    notes: Optional[str] = None
    observed_at: datetime


class IntentTimelineEntry(BaseModel):
    """One signal of either source, flattened for the timeline."""

    source: SignalSource
    signal: Union[FirstPartySignalOut, ThirdPartySignalOut]
    observed_at: datetime


class IntentScoreOut(BaseModel):
    total_score: int
    first_party_score: int
    third_party_score: int
    is_in_market: bool
    signal_count: int


class LoggedSignalOut(FirstPartySignalOut):
    action: str


class LogSignalResponse(SuccessResponse):
    signal: LoggedSignalOut


class BatchLogSignalRequest(BaseModel):
    signals: List[Dict[str, Any]] = Field(..., min_length=1)


class BatchLogSignalResponse(SuccessResponse):
    logged: int
    skipped: int
    validation_errors: Optional[List[str]] = None
    signals: List[FirstPartySignalOut]
