import logging
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import func, select, update

from fitcheck.models.scoring_rule import ScoringRule, ScoringSettings
from fitcheck.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ScoringRuleRepository(BaseRepository):
    """Encapsulates queries against ``scoring_rules`` and ``scoring_settings``."""

    async def list_rules(self) -> List[ScoringRule]:
        """Return every rule ordered by ``sort_order``."""
        result = await self._db.execute(
            select(ScoringRule).order_by(ScoringRule.sort_order, ScoringRule.created_at)
        )
        return list(result.scalars().all())

    async def get_by_id(self, rule_id: UUID) -> Optional[ScoringRule]:
        result = await self._db.execute(
            select(ScoringRule).where(ScoringRule.id == rule_id)
        )
        return result.scalar_one_or_none()

    async def next_sort_order(self) -> int:
        result = await self._db.execute(select(func.max(ScoringRule.sort_order)))
        return (result.scalar() or 0) + 1

    async def create(self, **kwargs: Any) -> ScoringRule:
        """Insert a new rule, appending it to the end of the ordering."""
        if kwargs.get("sort_order") is None:
            kwargs["sort_order"] = await self.next_sort_order()
        return await self._save(ScoringRule(**kwargs))

    async def update(self, rule: ScoringRule, **fields: Any) -> ScoringRule:
        return await self._apply(rule, **fields)

    async def delete(self, rule: ScoringRule) -> None:
        await self._db.delete(rule)
        await self._db.flush()

    async def reorder(self, rule_ids: List[UUID]) -> None:
        """Persist the given order: position *i* gets ``sort_order = i + 1``."""
        for index, rule_id in enumerate(rule_ids):
            await self._db.execute(
                update(ScoringRule)
                .where(ScoringRule.id == rule_id)
                .values(sort_order=index + 1)
            )
        await self._db.flush()

    async def seed_if_empty(self) -> None:
        """Insert default scoring rules when the table is empty.

        The canonical rule definitions live in
        ``fitcheck.core.default_scoring_rules.DEFAULT_SCORING_RULES``.
        """
        from fitcheck.core.default_scoring_rules import DEFAULT_SCORING_RULES

        count_result = await self._db.execute(
            select(func.count()).select_from(ScoringRule)
        )
        if count_result.scalar():
            return

        logger.info("scoring_rules table is empty, seeding defaults")
        for rule_data in DEFAULT_SCORING_RULES:
            self._db.add(ScoringRule(**rule_data))
        await self._db.flush()
        logger.info("Seeded %d default scoring rules", len(DEFAULT_SCORING_RULES))

    async def get_settings(self) -> ScoringSettings:
        return await self._singleton(ScoringSettings)

    async def update_settings(self, **fields: Any) -> ScoringSettings:
        return await self._apply(await self.get_settings(), **fields)
