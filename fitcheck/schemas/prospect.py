"""ICP scoring, enrichment, outreach and workspace schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from fitcheck.schemas.common import (
    OutreachTone,
    ProspectSortField,
    ScoreCategory,
    ScoringMode,
    SortOrder,
    SuccessResponse,
    Tier,
)


class ICPCriteria(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    weight: int = Field(..., ge=0, le=100)
    description: str = ""


class CriteriaScore(BaseModel):
    criteria_id: str
    criteria_name: str
    score: float
    max_score: int
    weight: int
    reasoning: str


class OutreachBlock(BaseModel):
    subject_line: Optional[str] = None
    opening_line: str
    value_hook: Optional[str] = None
    cta: Optional[str] = None


class ScoreProspectRequest(BaseModel):
    company_info: str = Field(..., min_length=1)
    criteria: List[ICPCriteria] = Field(..., min_length=1)
    scoring_mode: ScoringMode = ScoringMode.simple
    outreach_tone: OutreachTone = OutreachTone.casual


class ScoreProspectResult(BaseModel):
    company_name: str
    total_score: float
    criteria_breakdown: List[CriteriaScore]
    outreach: OutreachBlock
    scoring_mode: ScoringMode
    outreach_tone: OutreachTone


class ProspectScore(BaseModel):
    """A scored prospect as kept in the workspace."""

    id: str
    company_name: str
    company_description: str
    total_score: float
    tier: Tier
    score_category: ScoreCategory
    criteria_breakdown: List[CriteriaScore]
    outreach: OutreachBlock
    scoring_mode: ScoringMode
    outreach_tone: OutreachTone
    created_at: datetime


class BatchScoreRequest(BaseModel):
    """Newline-separated company descriptions, one prospect per line."""

    companies: str = Field(..., min_length=1)
    save: bool = True


class BatchFailure(BaseModel):
    company: str
    error: str


class BatchScoreResult(BaseModel):
    scored: List[ProspectScore]
    failed: List[BatchFailure]


class EnrichRequest(BaseModel):
    url: str = Field(..., min_length=1)


class EnrichedCompany(BaseModel):
    company_name: str
    description: str = ""
    industry: str = "Unknown"
    company_size: str = "Unknown"
    estimated_revenue: str = "Unknown"
    funding_stage: str = "Unknown"
    tech_stack: List[str] = Field(default_factory=list)
    region: str = "Unknown"
    website: str
    raw_content: str = ""
    data_sources: List[str] = Field(default_factory=list)


class EnrichResponse(SuccessResponse):
    data: EnrichedCompany


class RegenerateOutreachRequest(BaseModel):
    company_name: str = Field(..., min_length=1)
    company_description: str = Field(..., min_length=1)
    tone: OutreachTone


class RegenerateOutreachResponse(SuccessResponse):
    outreach: OutreachBlock
    tone: OutreachTone


class TierInfo(BaseModel):
    tier: Tier
    min_score: int
    action: str
    description: str


class ProspectQuery(BaseModel):
    search: Optional[str] = None
    sort_by: ProspectSortField = ProspectSortField.tier
    order: SortOrder = SortOrder.asc


class CriteriaWeightUpdate(BaseModel):
    weight: int = Field(..., ge=0, le=100)


class CompareRequest(BaseModel):
    prospect_ids: List[str] = Field(..., min_length=1)


class WorkspaceOut(BaseModel):
    criteria: List[ICPCriteria]
    prospects: List[ProspectScore]
    scoring_mode: ScoringMode
    outreach_tone: OutreachTone


class WorkspaceSettingsUpdate(BaseModel):
    scoring_mode: Optional[ScoringMode] = None
    outreach_tone: Optional[OutreachTone] = None


class AddProspectRequest(BaseModel):
    """Score one company with the workspace criteria and keep it."""

    company_info: str = Field(..., min_length=1)
