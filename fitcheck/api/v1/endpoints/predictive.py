from typing import List

from fastapi import APIRouter, Depends

from fitcheck.api.deps import get_predictive_service
from fitcheck.schemas.predictive import (
    HistoricalDealCreate,
    HistoricalDealOut,
    ModelStateOut,
    PredictionResult,
    PredictiveLeadData,
    PredictiveSettingsOut,
    PredictiveSettingsUpdate,
    TrainingResult,
)
from fitcheck.services.predictive_scoring import PredictiveScoringService

router = APIRouter(prefix="/predictive", tags=["Predictive Scoring"])


@router.get("/settings", response_model=PredictiveSettingsOut)
async def get_settings(
    service: PredictiveScoringService = Depends(get_predictive_service),
) -> PredictiveSettingsOut:
    return await service.get_settings()


@router.patch("/settings", response_model=PredictiveSettingsOut)
async def update_settings(
    payload: PredictiveSettingsUpdate,
    service: PredictiveScoringService = Depends(get_predictive_service),
) -> PredictiveSettingsOut:
    return await service.update_settings(**payload.model_dump(exclude_unset=True))


@router.get("/model", response_model=ModelStateOut)
async def get_model_state(
    service: PredictiveScoringService = Depends(get_predictive_service),
) -> ModelStateOut:
    return await service.get_model_state()


@router.get("/deals", response_model=List[HistoricalDealOut])
async def list_deals(
    service: PredictiveScoringService = Depends(get_predictive_service),
) -> List[HistoricalDealOut]:
    return await service.list_deals()


@router.post("/deals", response_model=HistoricalDealOut, status_code=201)
async def add_deal(
    payload: HistoricalDealCreate,
    service: PredictiveScoringService = Depends(get_predictive_service),
) -> HistoricalDealOut:
    return await service.add_deal(payload)


@router.post("/train", response_model=TrainingResult)
async def train_model(
    service: PredictiveScoringService = Depends(get_predictive_service),
) -> TrainingResult:
    """Retrain the model from every stored historical deal."""
    result = await service.train()
    return TrainingResult(**result)


@router.post("/predict", response_model=PredictionResult)
async def predict_lead(
    lead: PredictiveLeadData,
    service: PredictiveScoringService = Depends(get_predictive_service),
) -> PredictionResult:
    result = await service.predict(lead)
    return PredictionResult(**result)
