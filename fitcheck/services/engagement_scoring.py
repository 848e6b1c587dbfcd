import logging
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from fitcheck.core.exceptions import EngagementTypeNotFoundError
from fitcheck.core.rounding import round_half_up
from fitcheck.repositories.engagement_repository import EngagementRepository
from fitcheck.schemas.common import EngagementCategory, EngagementTemperature
from fitcheck.schemas.engagement import EngagementEventCreate

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86400.0

TOP_LEADS_RECENT_EVENTS = 5


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def calculate_decay_multiplier(
    occurred_at: datetime, decay_period_days: int, now: Optional[datetime] = None
) -> float:
    """Half-life decay: points halve every ``decay_period_days``."""
    now = now or datetime.now(timezone.utc)
    days_since_event = (
        _as_aware(now) - _as_aware(occurred_at)
    ).total_seconds() / _SECONDS_PER_DAY
    return 0.5 ** (days_since_event / decay_period_days)


def get_temperature(score: int, settings_row) -> EngagementTemperature:
    """Classify a decayed score.

    Hot is checked before warm, so overlapping thresholds resolve to the
    hotter label.
    """
    if score >= settings_row.hot_threshold:
        return EngagementTemperature.hot
    if score >= settings_row.warm_threshold:
        return EngagementTemperature.warm
    return EngagementTemperature.cold


def calculate_engagement_score(
    events: List, settings_row, now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Derive the engagement score from a lead's events (newest first)."""
    now = now or datetime.now(timezone.utc)
    raw_score = sum(event.points_earned for event in events)
    decayed_score = round_half_up(
        sum(
            event.points_earned
            * calculate_decay_multiplier(
                event.occurred_at, settings_row.decay_period_days, now
            )
            for event in events
        )
    )
    return {
        "raw_score": raw_score,
        "decayed_score": decayed_score,
        "temperature": get_temperature(decayed_score, settings_row),
        "event_count": len(events),
        "last_activity": events[0].occurred_at if events else None,
    }


def calculate_category_breakdown(
    events: List, settings_row, now: Optional[datetime] = None
) -> Dict[EngagementCategory, Dict[str, int]]:
    """Per-category counts and points; decayed points are rounded per event."""
    now = now or datetime.now(timezone.utc)
    breakdown = {
        category: {"count": 0, "points": 0, "decayed_points": 0}
        for category in EngagementCategory
    }
    for event in events:
        engagement_type = getattr(event, "engagement_type", None)
        try:
            category = EngagementCategory(engagement_type.category)
        except (AttributeError, ValueError):
            category = EngagementCategory.web
        multiplier = calculate_decay_multiplier(
            event.occurred_at, settings_row.decay_period_days, now
        )
        bucket = breakdown[category]
        bucket["count"] += 1
        bucket["points"] += event.points_earned
        bucket["decayed_points"] += round_half_up(event.points_earned * multiplier)
    return breakdown


def rank_engaged_leads(
    events: List, settings_row, limit: int = 10, now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """Group events (newest first) by lead and rank by decayed score."""
    grouped: "OrderedDict[str, List]" = OrderedDict()
    for event in events:
        grouped.setdefault(event.lead_id, []).append(event)

    summaries = [
        {
            "lead_id": lead_id,
            "score": calculate_engagement_score(lead_events, settings_row, now),
            "recent_events": lead_events[:TOP_LEADS_RECENT_EVENTS],
        }
        for lead_id, lead_events in grouped.items()
    ]
    summaries.sort(key=lambda s: s["score"]["decayed_score"], reverse=True)
    return summaries[:limit]


class EngagementScoringService:
    """Engagement settings, event logging and derived scores."""

    def __init__(self, engagement_repo: EngagementRepository) -> None:
        self._repo = engagement_repo

    async def get_settings(self):
        return await self._repo.get_settings()

    async def update_settings(self, **fields: Any):
        settings_row = await self._repo.update_settings(**fields)
        await self._repo.commit()
        return settings_row

    async def list_types(self) -> List:
        return await self._repo.list_types()

    async def seed_defaults(self) -> List:
        await self._repo.seed_types_if_empty()
        await self._repo.commit()
        return await self._repo.list_types()

    async def update_type(self, type_id: UUID, **fields: Any):
        engagement_type = await self._repo.get_type(type_id)
        if engagement_type is None:
            raise EngagementTypeNotFoundError(f"Engagement type {type_id} not found")
        engagement_type = await self._repo.update_type(engagement_type, **fields)
        await self._repo.commit()
        return engagement_type

    async def log_event(self, payload: EngagementEventCreate):
        """Append an event; points default to the type's current value."""
        engagement_type = await self._repo.get_type(payload.engagement_type_id)
        if engagement_type is None:
            raise EngagementTypeNotFoundError(
                f"Engagement type {payload.engagement_type_id} not found"
            )
        points = (
            payload.points_earned
            if payload.points_earned is not None
            else engagement_type.current_points
        )
        event = await self._repo.add_event(
            lead_id=payload.lead_id,
            engagement_type_id=engagement_type.id,
            points_earned=points,
            occurred_at=payload.occurred_at or datetime.now(timezone.utc),
            metadata=payload.metadata,
        )
        await self._repo.commit()
        logger.info(
            "Logged %s for lead %s (+%d points)",
            engagement_type.name,
            payload.lead_id,
            points,
        )
        return event

    async def list_events(self, lead_id: str) -> List:
        return await self._repo.list_events_for_lead(lead_id)

    async def get_score(self, lead_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        settings_row = await self._repo.get_settings()
        events = await self._repo.list_events_for_lead(lead_id)
        return calculate_engagement_score(events, settings_row, now)

    async def get_breakdown(self, lead_id: str, now: Optional[datetime] = None):
        settings_row = await self._repo.get_settings()
        events = await self._repo.list_events_for_lead(lead_id)
        return calculate_category_breakdown(events, settings_row, now)

    async def top_engaged_leads(
        self, period_days: int = 30, limit: int = 10, now: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        now = now or datetime.now(timezone.utc)
        settings_row = await self._repo.get_settings()
        events = await self._repo.list_events_since(now - timedelta(days=period_days))
        return rank_engaged_leads(events, settings_row, limit, now)
