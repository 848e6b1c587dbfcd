from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from fitcheck.api.deps import get_negative_service
from fitcheck.schemas.common import SuccessResponse
from fitcheck.schemas.negative import (
    DisqualifiedLeadOut,
    NegativeEvaluationOut,
    NegativeLeadData,
    NegativeRuleCreate,
    NegativeRuleOut,
    NegativeRuleUpdate,
    NegativeSettingsOut,
    NegativeSettingsUpdate,
    OverrideRequest,
)
from fitcheck.services.negative_scoring import NegativeScoringService

router = APIRouter(prefix="/negative-scoring", tags=["Negative Scoring"])


@router.get("/settings", response_model=NegativeSettingsOut)
async def get_settings(
    service: NegativeScoringService = Depends(get_negative_service),
) -> NegativeSettingsOut:
    return await service.get_settings()


@router.patch("/settings", response_model=NegativeSettingsOut)
async def update_settings(
    payload: NegativeSettingsUpdate,
    service: NegativeScoringService = Depends(get_negative_service),
) -> NegativeSettingsOut:
    return await service.update_settings(**payload.model_dump(exclude_unset=True))


@router.get("/rules", response_model=List[NegativeRuleOut])
async def list_rules(
    service: NegativeScoringService = Depends(get_negative_service),
) -> List[NegativeRuleOut]:
    return await service.list_rules()


@router.post("/rules/seed", response_model=List[NegativeRuleOut])
async def seed_rules(
    service: NegativeScoringService = Depends(get_negative_service),
) -> List[NegativeRuleOut]:
    """Insert the default negative rules when none exist yet."""
    return await service.seed_defaults()


@router.post("/rules", response_model=NegativeRuleOut, status_code=201)
async def create_rule(
    payload: NegativeRuleCreate,
    service: NegativeScoringService = Depends(get_negative_service),
) -> NegativeRuleOut:
    return await service.create_rule(payload)


@router.patch("/rules/{rule_id}", response_model=NegativeRuleOut)
async def update_rule(
    rule_id: UUID,
    payload: NegativeRuleUpdate,
    service: NegativeScoringService = Depends(get_negative_service),
) -> NegativeRuleOut:
    return await service.update_rule(rule_id, payload)


@router.delete("/rules/{rule_id}", response_model=SuccessResponse)
async def delete_rule(
    rule_id: UUID,
    confirm: bool = Query(False, description="Must be true to delete"),
    service: NegativeScoringService = Depends(get_negative_service),
) -> SuccessResponse:
    await service.delete_rule(rule_id, confirm=confirm)
    return SuccessResponse()


@router.post("/evaluate", response_model=NegativeEvaluationOut)
async def evaluate_lead(
    lead: NegativeLeadData,
    service: NegativeScoringService = Depends(get_negative_service),
) -> NegativeEvaluationOut:
    """Apply the negative rules; disqualified leads are recorded."""
    result = await service.evaluate(lead)
    return NegativeEvaluationOut(**result)


@router.get("/disqualified", response_model=List[DisqualifiedLeadOut])
async def list_disqualified(
    service: NegativeScoringService = Depends(get_negative_service),
) -> List[DisqualifiedLeadOut]:
    return await service.list_disqualified()


@router.get("/disqualified/{lead_id}", response_model=DisqualifiedLeadOut)
async def get_disqualification(
    lead_id: str,
    service: NegativeScoringService = Depends(get_negative_service),
) -> DisqualifiedLeadOut:
    return await service.get_disqualification(lead_id)


@router.post("/disqualified/{lead_id}/override", response_model=DisqualifiedLeadOut)
async def override_disqualification(
    lead_id: str,
    payload: OverrideRequest,
    confirm: bool = Query(False, description="Must be true to override"),
    service: NegativeScoringService = Depends(get_negative_service),
) -> DisqualifiedLeadOut:
    return await service.override(
        lead_id,
        reason=payload.reason,
        overridden_by=payload.overridden_by,
        confirm=confirm,
    )


@router.delete("/disqualified/{lead_id}", response_model=SuccessResponse)
async def remove_disqualification(
    lead_id: str,
    confirm: bool = Query(False, description="Must be true to remove"),
    service: NegativeScoringService = Depends(get_negative_service),
) -> SuccessResponse:
    await service.remove(lead_id, confirm=confirm)
    return SuccessResponse()
