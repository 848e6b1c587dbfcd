import logging
from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import UUID

from fitcheck.core.constants import (
    CONFIDENCE_MULTIPLIERS,
    DEFAULT_SIGNAL_WEIGHT,
    VISIT_COUNT_CAP,
    VISIT_INCREMENT,
)
from fitcheck.core.exceptions import SignalNotFoundError
from fitcheck.core.rounding import round_half_up
from fitcheck.repositories.intent_repository import IntentRepository
from fitcheck.schemas.common import ConfidenceLevel, SignalSource
from fitcheck.schemas.intent import FirstPartySignalCreate, ThirdPartySignalCreate

logger = logging.getLogger(__name__)

# signal_type -> IntentSettings column holding its weight
_FIRST_PARTY_WEIGHT_FIELDS = {
    "pricing_page": "pricing_page_weight",
    "demo_page": "demo_page_weight",
    "product_page": "product_page_weight",
    "email_open": "email_open_weight",
    "email_click": "email_click_weight",
    "email_reply": "email_reply_weight",
    "trial_signup": "trial_signup_weight",
    "comparison_page": "product_page_weight",
}

_THIRD_PARTY_WEIGHT_FIELDS = {
    "g2_research": "g2_research_weight",
    "trustradius_research": "trustradius_weight",
    "competitor_comparison": "competitor_research_weight",
    "intent_provider": "intent_provider_weight",
    "capterra_research": "trustradius_weight",
}


def get_first_party_weight(signal_type: str, settings_row) -> float:
    # Unmapped types get the default; a configured 0 is returned as 0
    field = _FIRST_PARTY_WEIGHT_FIELDS.get(signal_type)
    if field is None:
        return DEFAULT_SIGNAL_WEIGHT
    return getattr(settings_row, field)


def get_third_party_weight(signal_type: str, settings_row) -> float:
    # Same lookup as first-party: only unmapped types fall back
    field = _THIRD_PARTY_WEIGHT_FIELDS.get(signal_type)
    if field is None:
        return DEFAULT_SIGNAL_WEIGHT
    return getattr(settings_row, field)


def visit_multiplier(visit_count: int) -> float:
    """Diminishing returns: 1.0 for one visit, capped at 1.8 from five visits."""
    capped = min(visit_count, VISIT_COUNT_CAP)
    return 1 + (capped - 1) * VISIT_INCREMENT


def confidence_multiplier(confidence_level: str) -> float:
    try:
        return CONFIDENCE_MULTIPLIERS[ConfidenceLevel(confidence_level)]
    except ValueError:
        return CONFIDENCE_MULTIPLIERS[ConfidenceLevel.low]


def calculate_intent_score(
    first_party_signals: List, third_party_signals: List, settings_row
) -> Dict[str, Any]:
    """Blend first- and third-party signals into a 0-100 intent score.

    Without settings every component is zero.
    """
    signal_count = len(first_party_signals) + len(third_party_signals)
    if settings_row is None:
        return {
            "total_score": 0,
            "first_party_score": 0,
            "third_party_score": 0,
            "is_in_market": False,
            "signal_count": signal_count,
        }

    first_party_score = sum(
        get_first_party_weight(s.signal_type, settings_row) * visit_multiplier(s.visit_count)
        for s in first_party_signals
    )
    third_party_score = sum(
        get_third_party_weight(s.signal_type, settings_row)
        * confidence_multiplier(s.confidence_level)
        for s in third_party_signals
    )

    total_score = min(
        100,
        round_half_up(
            first_party_score * settings_row.first_party_weight
            + third_party_score * settings_row.third_party_weight
        ),
    )
    return {
        "total_score": total_score,
        "first_party_score": round_half_up(first_party_score),
        "third_party_score": round_half_up(third_party_score),
        "is_in_market": total_score >= settings_row.in_market_threshold,
        "signal_count": signal_count,
    }


def build_timeline(first_party_signals: List, third_party_signals: List) -> List[Dict[str, Any]]:
    """Merge both signal sources, newest first."""
    entries = [
        {"source": SignalSource.first_party, "signal": s, "observed_at": s.observed_at}
        for s in first_party_signals
    ] + [
        {"source": SignalSource.third_party, "signal": s, "observed_at": s.observed_at}
        for s in third_party_signals
    ]
    entries.sort(key=lambda e: e["observed_at"], reverse=True)
    return entries


class IntentScoringService:
    """Intent settings, signal management and derived score."""

    def __init__(self, intent_repo: IntentRepository) -> None:
        self._repo = intent_repo

    async def get_settings(self):
        return await self._repo.get_settings()

    async def update_settings(self, **fields: Any):
        settings_row = await self._repo.update_settings(**fields)
        await self._repo.commit()
        return settings_row

    async def add_first_party_signal(self, payload: FirstPartySignalCreate):
        signal = await self._repo.add_first_party(
            lead_id=payload.lead_id,
            signal_type=payload.signal_type.value,
            page_url=payload.page_url,
            visit_count=payload.visit_count,
            metadata_=payload.metadata,
            observed_at=payload.observed_at or datetime.now(timezone.utc),
        )
        await self._repo.commit()
        return signal

    async def add_third_party_signal(self, payload: ThirdPartySignalCreate):
        signal = await self._repo.add_third_party(
            lead_id=payload.lead_id,
            source_name=payload.source_name,
            signal_type=payload.signal_type.value,
            confidence_level=payload.confidence_level.value,
            notes=payload.notes,
            observed_at=payload.observed_at or datetime.now(timezone.utc),
        )
        await self._repo.commit()
        logger.info(
            "Added %s signal from %s for lead %s",
            payload.signal_type.value,
            payload.source_name,
            payload.lead_id,
        )
        return signal

    async def delete_signal(self, source: SignalSource, signal_id: UUID) -> None:
        if source == SignalSource.first_party:
            signal = await self._repo.get_first_party(signal_id)
        else:
            signal = await self._repo.get_third_party(signal_id)
        if signal is None:
            raise SignalNotFoundError(f"Signal {signal_id} not found")
        await self._repo.delete_signal(signal)
        await self._repo.commit()

    async def get_score(self, lead_id: str) -> Dict[str, Any]:
        settings_row = await self._repo.find_settings()
        first_party = await self._repo.list_first_party(lead_id)
        third_party = await self._repo.list_third_party(lead_id)
        return calculate_intent_score(first_party, third_party, settings_row)

    async def get_timeline(self, lead_id: str) -> List[Dict[str, Any]]:
        first_party = await self._repo.list_first_party(lead_id)
        third_party = await self._repo.list_third_party(lead_id)
        return build_timeline(first_party, third_party)
