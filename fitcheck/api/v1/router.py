from fastapi import APIRouter

from fitcheck.api.v1.endpoints import (
    engagement,
    health,
    intent,
    negative,
    predictive,
    prospects,
    scoring_rules,
    workspace,
)

router = APIRouter(prefix="/api/v1")

router.include_router(scoring_rules.router)
router.include_router(engagement.router)
router.include_router(intent.router)
router.include_router(negative.router)
router.include_router(predictive.router)
router.include_router(prospects.router)
router.include_router(workspace.router)
router.include_router(health.router)
