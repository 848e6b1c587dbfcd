from typing import List

from fastapi import APIRouter, Depends, Request

from fitcheck.api.deps import (
    get_enrichment_service,
    get_outreach_service,
    get_prospect_scoring_service,
    get_workspace_dep,
)
from fitcheck.core.rate_limit import limiter
from fitcheck.schemas.common import Tier
from fitcheck.schemas.prospect import (
    BatchScoreRequest,
    BatchScoreResult,
    EnrichRequest,
    EnrichResponse,
    RegenerateOutreachRequest,
    RegenerateOutreachResponse,
    ScoreProspectRequest,
    ScoreProspectResult,
    TierInfo,
)
from fitcheck.services.enrichment import EnrichmentService
from fitcheck.services.outreach import OutreachService
from fitcheck.services.prospect_scoring import ProspectScoringService, get_tier_info
from fitcheck.services.workspace import Workspace

router = APIRouter(prefix="/prospects", tags=["ICP Scoring"])


@router.post("/score", response_model=ScoreProspectResult)
@limiter.limit("10/minute")
async def score_prospect(
    request: Request,
    payload: ScoreProspectRequest,
    service: ProspectScoringService = Depends(get_prospect_scoring_service),
) -> ScoreProspectResult:
    """Score one company description against the given criteria.

    Rate-limited to 10 requests/minute per IP since every call hits the
    AI gateway.
    """
    result = await service.score_prospect(
        payload.company_info,
        payload.criteria,
        scoring_mode=payload.scoring_mode,
        outreach_tone=payload.outreach_tone,
    )
    return ScoreProspectResult(**result)


@router.post("/batch", response_model=BatchScoreResult)
@limiter.limit("2/minute")
async def batch_score(
    request: Request,
    payload: BatchScoreRequest,
    service: ProspectScoringService = Depends(get_prospect_scoring_service),
    workspace: Workspace = Depends(get_workspace_dep),
) -> BatchScoreResult:
    """Score one company per line using the workspace criteria and settings.

    Lines are scored sequentially; failures are reported alongside the
    successes instead of aborting the batch.
    """
    result = await service.batch_score(
        payload.companies.splitlines(),
        workspace.criteria,
        scoring_mode=workspace.scoring_mode,
        outreach_tone=workspace.outreach_tone,
    )
    batch = BatchScoreResult(**result)
    if payload.save and batch.scored:
        for prospect in batch.scored:
            workspace.add_prospect(prospect)
        workspace.persist()
    return batch


@router.post("/enrich", response_model=EnrichResponse)
@limiter.limit("10/minute")
async def enrich_company(
    request: Request,
    payload: EnrichRequest,
    service: EnrichmentService = Depends(get_enrichment_service),
) -> EnrichResponse:
    """Waterfall-enrich a company from its website URL."""
    data = await service.enrich(payload.url)
    return EnrichResponse(data=data)


@router.post("/regenerate-outreach", response_model=RegenerateOutreachResponse)
@limiter.limit("10/minute")
async def regenerate_outreach(
    request: Request,
    payload: RegenerateOutreachRequest,
    service: OutreachService = Depends(get_outreach_service),
) -> RegenerateOutreachResponse:
    result = await service.regenerate(
        payload.company_name, payload.company_description, payload.tone
    )
    return RegenerateOutreachResponse(**result)


@router.get("/tiers", response_model=List[TierInfo])
async def list_tiers() -> List[TierInfo]:
    """Tier thresholds and the recommended action for each."""
    return [TierInfo(**get_tier_info(tier)) for tier in Tier]
