import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select

from fitcheck.models.negative import (
    DisqualifiedLead,
    NegativeScoringRule,
    NegativeScoringSettings,
)
from fitcheck.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class NegativeScoringRepository(BaseRepository):
    """Negative rules, their settings and persisted disqualifications."""

    async def get_settings(self) -> NegativeScoringSettings:
        return await self._singleton(NegativeScoringSettings)

    async def update_settings(self, **fields: Any) -> NegativeScoringSettings:
        return await self._apply(await self.get_settings(), **fields)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    async def list_rules(self) -> List[NegativeScoringRule]:
        result = await self._db.execute(
            select(NegativeScoringRule).order_by(NegativeScoringRule.sort_order)
        )
        return list(result.scalars().all())

    async def get_rule(self, rule_id: UUID) -> Optional[NegativeScoringRule]:
        result = await self._db.execute(
            select(NegativeScoringRule).where(NegativeScoringRule.id == rule_id)
        )
        return result.scalar_one_or_none()

    async def create_rule(self, **kwargs: Any) -> NegativeScoringRule:
        if kwargs.get("sort_order") is None:
            result = await self._db.execute(
                select(func.max(NegativeScoringRule.sort_order))
            )
            kwargs["sort_order"] = (result.scalar() or 0) + 1
        return await self._save(NegativeScoringRule(**kwargs))

    async def update_rule(self, rule: NegativeScoringRule, **fields: Any) -> NegativeScoringRule:
        return await self._apply(rule, **fields)

    async def delete_rule(self, rule: NegativeScoringRule) -> None:
        await self._db.delete(rule)
        await self._db.flush()

    async def seed_rules_if_empty(self) -> None:
        from fitcheck.core.default_scoring_rules import DEFAULT_NEGATIVE_RULES

        count_result = await self._db.execute(
            select(func.count()).select_from(NegativeScoringRule)
        )
        if count_result.scalar():
            return

        logger.info("negative_scoring_rules table is empty, seeding defaults")
        for rule_data in DEFAULT_NEGATIVE_RULES:
            self._db.add(NegativeScoringRule(**rule_data))
        await self._db.flush()

    # ------------------------------------------------------------------
    # Disqualifications
    # ------------------------------------------------------------------

    async def list_disqualified(self) -> List[DisqualifiedLead]:
        result = await self._db.execute(
            select(DisqualifiedLead).order_by(DisqualifiedLead.disqualified_at.desc())
        )
        return list(result.scalars().all())

    async def get_disqualification(self, lead_id: str) -> Optional[DisqualifiedLead]:
        result = await self._db.execute(
            select(DisqualifiedLead).where(DisqualifiedLead.lead_id == lead_id)
        )
        return result.scalar_one_or_none()

    async def upsert_disqualification(
        self,
        lead_id: str,
        total_negative_score: int,
        triggered_rules: List[Dict[str, Any]],
    ) -> DisqualifiedLead:
        """Insert or replace the disqualification for *lead_id*.

        Re-disqualifying a lead clears any previous override.
        """
        record = await self.get_disqualification(lead_id)
        if record is None:
            record = DisqualifiedLead(lead_id=lead_id)
        record.total_negative_score = total_negative_score
        record.triggered_rules = triggered_rules
        record.disqualified_at = datetime.now(timezone.utc)
        record.is_overridden = False
        record.override_reason = None
        record.overridden_at = None
        record.overridden_by = None
        return await self._save(record)

    async def override(
        self, record: DisqualifiedLead, reason: str, overridden_by: str = "user"
    ) -> DisqualifiedLead:
        record.is_overridden = True
        record.override_reason = reason
        record.overridden_at = datetime.now(timezone.utc)
        record.overridden_by = overridden_by
        return await self._save(record)

    async def delete_disqualification(self, record: DisqualifiedLead) -> None:
        await self._db.delete(record)
        await self._db.flush()
