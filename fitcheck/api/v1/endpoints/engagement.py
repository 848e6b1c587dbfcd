from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from fitcheck.api.deps import get_engagement_service
from fitcheck.schemas.engagement import (
    EngagementBreakdownOut,
    EngagementEventCreate,
    EngagementEventOut,
    EngagementScoreOut,
    EngagementSettingsOut,
    EngagementSettingsUpdate,
    EngagementTypeOut,
    EngagementTypeUpdate,
    TopEngagedLead,
)
from fitcheck.services.engagement_scoring import EngagementScoringService

router = APIRouter(prefix="/engagement", tags=["Engagement Scoring"])


@router.get("/settings", response_model=EngagementSettingsOut)
async def get_settings(
    service: EngagementScoringService = Depends(get_engagement_service),
) -> EngagementSettingsOut:
    return await service.get_settings()


@router.patch("/settings", response_model=EngagementSettingsOut)
async def update_settings(
    payload: EngagementSettingsUpdate,
    service: EngagementScoringService = Depends(get_engagement_service),
) -> EngagementSettingsOut:
    return await service.update_settings(**payload.model_dump(exclude_unset=True))


@router.get("/types", response_model=List[EngagementTypeOut])
async def list_types(
    service: EngagementScoringService = Depends(get_engagement_service),
) -> List[EngagementTypeOut]:
    return await service.list_types()


@router.post("/types/seed", response_model=List[EngagementTypeOut])
async def seed_types(
    service: EngagementScoringService = Depends(get_engagement_service),
) -> List[EngagementTypeOut]:
    """Insert the default engagement types when none exist yet."""
    return await service.seed_defaults()


@router.patch("/types/{type_id}", response_model=EngagementTypeOut)
async def update_type(
    type_id: UUID,
    payload: EngagementTypeUpdate,
    service: EngagementScoringService = Depends(get_engagement_service),
) -> EngagementTypeOut:
    """Change a type's current points or enable/disable it."""
    return await service.update_type(type_id, **payload.model_dump(exclude_unset=True))


@router.post("/events", response_model=EngagementEventOut, status_code=201)
async def log_event(
    payload: EngagementEventCreate,
    service: EngagementScoringService = Depends(get_engagement_service),
) -> EngagementEventOut:
    return await service.log_event(payload)


@router.get("/top-leads", response_model=List[TopEngagedLead])
async def top_engaged_leads(
    period_days: int = Query(30, ge=1, le=365),
    limit: int = Query(10, ge=1, le=100),
    service: EngagementScoringService = Depends(get_engagement_service),
) -> List[TopEngagedLead]:
    """Leads ranked by decayed score over the trailing period."""
    leads = await service.top_engaged_leads(period_days=period_days, limit=limit)
    return [TopEngagedLead.model_validate(lead, from_attributes=True) for lead in leads]


@router.get("/leads/{lead_id}/events", response_model=List[EngagementEventOut])
async def list_events(
    lead_id: str,
    service: EngagementScoringService = Depends(get_engagement_service),
) -> List[EngagementEventOut]:
    return await service.list_events(lead_id)


@router.get("/leads/{lead_id}/score", response_model=EngagementScoreOut)
async def get_score(
    lead_id: str,
    service: EngagementScoringService = Depends(get_engagement_service),
) -> EngagementScoreOut:
    result = await service.get_score(lead_id)
    return EngagementScoreOut(**result)


@router.get("/leads/{lead_id}/breakdown", response_model=EngagementBreakdownOut)
async def get_breakdown(
    lead_id: str,
    service: EngagementScoringService = Depends(get_engagement_service),
) -> EngagementBreakdownOut:
    categories = await service.get_breakdown(lead_id)
    return EngagementBreakdownOut(lead_id=lead_id, categories=categories)
