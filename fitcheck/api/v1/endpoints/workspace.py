from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from fitcheck.api.deps import get_prospect_scoring_service, get_workspace_dep
from fitcheck.core.rate_limit import limiter
from fitcheck.schemas.common import ProspectSortField, SortOrder, SuccessResponse
from fitcheck.schemas.prospect import (
    AddProspectRequest,
    CompareRequest,
    CriteriaWeightUpdate,
    ICPCriteria,
    ProspectScore,
    WorkspaceOut,
    WorkspaceSettingsUpdate,
)
from fitcheck.services.prospect_scoring import ProspectScoringService
from fitcheck.services.workspace import Workspace

router = APIRouter(prefix="/workspace", tags=["Workspace"])


@router.get("", response_model=WorkspaceOut)
async def get_workspace(
    workspace: Workspace = Depends(get_workspace_dep),
) -> WorkspaceOut:
    return workspace.snapshot()


@router.patch("/settings", response_model=WorkspaceOut)
async def update_settings(
    payload: WorkspaceSettingsUpdate,
    workspace: Workspace = Depends(get_workspace_dep),
) -> WorkspaceOut:
    """Switch scoring mode or outreach tone for future scoring."""
    workspace.update_settings(**payload.model_dump(exclude_unset=True))
    workspace.persist()
    return workspace.snapshot()


@router.put("/criteria", response_model=List[ICPCriteria])
async def set_criteria(
    criteria: List[ICPCriteria],
    workspace: Workspace = Depends(get_workspace_dep),
) -> List[ICPCriteria]:
    workspace.set_criteria(criteria)
    workspace.persist()
    return workspace.criteria


@router.patch("/criteria/{criteria_id}", response_model=ICPCriteria)
async def update_criteria_weight(
    criteria_id: str,
    payload: CriteriaWeightUpdate,
    workspace: Workspace = Depends(get_workspace_dep),
) -> ICPCriteria:
    criterion = workspace.update_criteria_weight(criteria_id, payload.weight)
    workspace.persist()
    return criterion


@router.post("/criteria/reset", response_model=List[ICPCriteria])
async def reset_criteria(
    workspace: Workspace = Depends(get_workspace_dep),
) -> List[ICPCriteria]:
    workspace.reset_criteria()
    workspace.persist()
    return workspace.criteria


@router.get("/prospects", response_model=List[ProspectScore])
async def list_prospects(
    search: Optional[str] = Query(None, description="Matches company name or description"),
    sort_by: ProspectSortField = Query(ProspectSortField.tier),
    order: SortOrder = Query(SortOrder.asc),
    workspace: Workspace = Depends(get_workspace_dep),
) -> List[ProspectScore]:
    return workspace.query(search=search, sort_by=sort_by, order=order)


@router.post("/prospects", response_model=ProspectScore, status_code=201)
@limiter.limit("10/minute")
async def add_prospect(
    request: Request,
    payload: AddProspectRequest,
    service: ProspectScoringService = Depends(get_prospect_scoring_service),
    workspace: Workspace = Depends(get_workspace_dep),
) -> ProspectScore:
    """Score a company with the workspace criteria and save it."""
    result = await service.build_prospect(
        payload.company_info,
        workspace.criteria,
        workspace.scoring_mode,
        workspace.outreach_tone,
    )
    prospect = ProspectScore(**result)
    workspace.add_prospect(prospect)
    workspace.persist()
    return prospect


@router.delete("/prospects", response_model=SuccessResponse)
async def clear_prospects(
    confirm: bool = Query(False, description="Must be true to clear"),
    workspace: Workspace = Depends(get_workspace_dep),
) -> SuccessResponse:
    workspace.clear_prospects(confirm=confirm)
    workspace.persist()
    return SuccessResponse()


@router.post("/compare", response_model=List[ProspectScore])
async def compare_prospects(
    payload: CompareRequest,
    workspace: Workspace = Depends(get_workspace_dep),
) -> List[ProspectScore]:
    """Side-by-side view of up to three saved prospects."""
    return workspace.compare(payload.prospect_ids)


@router.get("/prospects/{prospect_id}", response_model=ProspectScore)
async def get_prospect(
    prospect_id: str,
    workspace: Workspace = Depends(get_workspace_dep),
) -> ProspectScore:
    return workspace.get_prospect(prospect_id)


@router.delete("/prospects/{prospect_id}", response_model=SuccessResponse)
async def remove_prospect(
    prospect_id: str,
    workspace: Workspace = Depends(get_workspace_dep),
) -> SuccessResponse:
    workspace.remove_prospect(prospect_id)
    workspace.persist()
    return SuccessResponse()
