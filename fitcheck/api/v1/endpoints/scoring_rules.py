from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from fitcheck.api.deps import get_rule_scoring_service
from fitcheck.schemas.common import SuccessResponse
from fitcheck.schemas.scoring_rules import (
    LeadProfile,
    RuleBasedScoreOut,
    RuleReorderRequest,
    ScoringRuleCreate,
    ScoringRuleOut,
    ScoringRuleUpdate,
    ScoringSettingsOut,
    ScoringSettingsUpdate,
)
from fitcheck.services.rule_scoring import RuleScoringService

router = APIRouter(prefix="/scoring-rules", tags=["Rule-Based Scoring"])


@router.get("/settings", response_model=ScoringSettingsOut)
async def get_settings(
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> ScoringSettingsOut:
    return await service.get_settings()


@router.patch("/settings", response_model=ScoringSettingsOut)
async def update_settings(
    payload: ScoringSettingsUpdate,
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> ScoringSettingsOut:
    return await service.update_settings(**payload.model_dump(exclude_unset=True))


@router.post("/evaluate", response_model=RuleBasedScoreOut)
async def evaluate_lead(
    lead: LeadProfile,
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> RuleBasedScoreOut:
    """Evaluate a lead against the enabled rules."""
    result = await service.evaluate(lead)
    return RuleBasedScoreOut.model_validate(result, from_attributes=True)


@router.post("/seed", response_model=List[ScoringRuleOut])
async def seed_rules(
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> List[ScoringRuleOut]:
    """Insert the default rule set when no rules exist yet."""
    await service.seed_defaults()
    return await service.list_rules()


@router.put("/order", response_model=List[ScoringRuleOut])
async def reorder_rules(
    payload: RuleReorderRequest,
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> List[ScoringRuleOut]:
    """Assign ``sort_order`` 1..n following the given id order."""
    return await service.reorder_rules(payload.rule_ids)


@router.get("", response_model=List[ScoringRuleOut])
async def list_rules(
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> List[ScoringRuleOut]:
    """Return every rule ordered by ``sort_order``."""
    return await service.list_rules()


@router.post("", response_model=ScoringRuleOut, status_code=201)
async def create_rule(
    payload: ScoringRuleCreate,
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> ScoringRuleOut:
    return await service.create_rule(payload)


@router.patch("/{rule_id}", response_model=ScoringRuleOut)
async def update_rule(
    rule_id: UUID,
    payload: ScoringRuleUpdate,
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> ScoringRuleOut:
    return await service.update_rule(rule_id, payload)


@router.post("/{rule_id}/toggle", response_model=ScoringRuleOut)
async def toggle_rule(
    rule_id: UUID,
    enabled: bool = Query(...),
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> ScoringRuleOut:
    return await service.toggle_rule(rule_id, enabled)


@router.delete("/{rule_id}", response_model=SuccessResponse)
async def delete_rule(
    rule_id: UUID,
    confirm: bool = Query(False, description="Must be true to delete"),
    service: RuleScoringService = Depends(get_rule_scoring_service),
) -> SuccessResponse:
    await service.delete_rule(rule_id, confirm=confirm)
    return SuccessResponse()
