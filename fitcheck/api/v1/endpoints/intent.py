from typing import List, Union
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from fitcheck.api.deps import get_intent_service, get_signal_logging_service
from fitcheck.core.rate_limit import limiter
from fitcheck.schemas.common import SignalSource, SuccessResponse
from fitcheck.schemas.intent import (
    BatchLogSignalRequest,
    BatchLogSignalResponse,
    FirstPartySignalCreate,
    FirstPartySignalOut,
    IntentScoreOut,
    IntentSettingsOut,
    IntentSettingsUpdate,
    IntentTimelineEntry,
    LoggedSignalOut,
    LogSignalResponse,
    ThirdPartySignalCreate,
    ThirdPartySignalOut,
)
from fitcheck.services.intent_scoring import IntentScoringService
from fitcheck.services.signal_logging import SignalLoggingService

router = APIRouter(prefix="/intent", tags=["Intent Scoring"])


@router.get("/settings", response_model=IntentSettingsOut)
async def get_settings(
    service: IntentScoringService = Depends(get_intent_service),
) -> IntentSettingsOut:
    return await service.get_settings()


@router.patch("/settings", response_model=IntentSettingsOut)
async def update_settings(
    payload: IntentSettingsUpdate,
    service: IntentScoringService = Depends(get_intent_service),
) -> IntentSettingsOut:
    return await service.update_settings(**payload.model_dump(exclude_unset=True))


@router.post(
    "/signals/first-party", response_model=FirstPartySignalOut, status_code=201
)
async def add_first_party_signal(
    payload: FirstPartySignalCreate,
    service: IntentScoringService = Depends(get_intent_service),
) -> FirstPartySignalOut:
    return await service.add_first_party_signal(payload)


@router.post(
    "/signals/third-party", response_model=ThirdPartySignalOut, status_code=201
)
async def add_third_party_signal(
    payload: ThirdPartySignalCreate,
    service: IntentScoringService = Depends(get_intent_service),
) -> ThirdPartySignalOut:
    return await service.add_third_party_signal(payload)


@router.delete("/signals/{source}/{signal_id}", response_model=SuccessResponse)
async def delete_signal(
    source: SignalSource,
    signal_id: UUID,
    service: IntentScoringService = Depends(get_intent_service),
) -> SuccessResponse:
    await service.delete_signal(source, signal_id)
    return SuccessResponse()


@router.get("/leads/{lead_id}/score", response_model=IntentScoreOut)
async def get_score(
    lead_id: str,
    service: IntentScoringService = Depends(get_intent_service),
) -> IntentScoreOut:
    result = await service.get_score(lead_id)
    return IntentScoreOut(**result)


@router.get("/leads/{lead_id}/timeline", response_model=List[IntentTimelineEntry])
async def get_timeline(
    lead_id: str,
    service: IntentScoringService = Depends(get_intent_service),
) -> List[IntentTimelineEntry]:
    """Both signal sources merged, newest first."""
    entries = await service.get_timeline(lead_id)
    return [
        IntentTimelineEntry(
            source=entry["source"],
            signal=(
                FirstPartySignalOut
                if entry["source"] == SignalSource.first_party
                else ThirdPartySignalOut
            ).model_validate(entry["signal"]),
            observed_at=entry["observed_at"],
        )
        for entry in entries
    ]


@router.post("/log-signal", response_model=Union[LogSignalResponse, BatchLogSignalResponse])
@limiter.limit("120/minute")
async def log_signal(
    request: Request,
    service: SignalLoggingService = Depends(get_signal_logging_service),
) -> Union[LogSignalResponse, BatchLogSignalResponse]:
    """Tracking ingest for first-party signals.

    Accepts either one signal object or ``{"signals": [...]}``. The raw
    body is validated here rather than by a schema so every problem is
    reported together.
    """
    body = await request.json()
    if isinstance(body, dict) and isinstance(body.get("signals"), list):
        batch = BatchLogSignalRequest(**body)
        result = await service.log_batch(batch.signals)
        return BatchLogSignalResponse.model_validate(result, from_attributes=True)

    signal = body if isinstance(body, dict) else {}
    row, action = await service.log_signal(signal)
    logged = FirstPartySignalOut.model_validate(row)
    return LogSignalResponse(
        signal=LoggedSignalOut(**logged.model_dump(), action=action)
    )
