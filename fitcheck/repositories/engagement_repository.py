import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select

from fitcheck.models.engagement import (
    EngagementEvent,
    EngagementSettings,
    EngagementType,
)
from fitcheck.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class EngagementRepository(BaseRepository):
    """Settings, engagement types and the append-only event log."""

    async def get_settings(self) -> EngagementSettings:
        return await self._singleton(EngagementSettings)

    async def update_settings(self, **fields: Any) -> EngagementSettings:
        return await self._apply(await self.get_settings(), **fields)

    async def list_types(self) -> List[EngagementType]:
        result = await self._db.execute(
            select(EngagementType).order_by(EngagementType.sort_order)
        )
        return list(result.scalars().all())

    async def get_type(self, type_id: UUID) -> Optional[EngagementType]:
        result = await self._db.execute(
            select(EngagementType).where(EngagementType.id == type_id)
        )
        return result.scalar_one_or_none()

    async def update_type(self, engagement_type: EngagementType, **fields: Any) -> EngagementType:
        return await self._apply(engagement_type, **fields)

    async def seed_types_if_empty(self) -> None:
        from fitcheck.core.default_scoring_rules import DEFAULT_ENGAGEMENT_TYPES

        count_result = await self._db.execute(
            select(func.count()).select_from(EngagementType)
        )
        if count_result.scalar():
            return

        logger.info("engagement_types table is empty, seeding defaults")
        for type_data in DEFAULT_ENGAGEMENT_TYPES:
            self._db.add(
                EngagementType(current_points=type_data["default_points"], **type_data)
            )
        await self._db.flush()
        logger.info("Seeded %d default engagement types", len(DEFAULT_ENGAGEMENT_TYPES))

    async def add_event(
        self,
        lead_id: str,
        engagement_type_id: UUID,
        points_earned: int,
        occurred_at: datetime,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> EngagementEvent:
        event = EngagementEvent(
            lead_id=lead_id,
            engagement_type_id=engagement_type_id,
            points_earned=points_earned,
            occurred_at=occurred_at,
            metadata_=metadata or {},
        )
        return await self._save(event)

    async def list_events_for_lead(self, lead_id: str) -> List[EngagementEvent]:
        """Return a lead's events, newest first."""
        result = await self._db.execute(
            select(EngagementEvent)
            .where(EngagementEvent.lead_id == lead_id)
            .order_by(EngagementEvent.occurred_at.desc())
        )
        return list(result.scalars().all())

    async def list_events_since(self, cutoff: datetime) -> List[EngagementEvent]:
        """Return all events at or after *cutoff*, newest first."""
        result = await self._db.execute(
            select(EngagementEvent)
            .where(EngagementEvent.occurred_at >= cutoff)
            .order_by(EngagementEvent.occurred_at.desc())
        )
        return list(result.scalars().all())
