from typing import Any, List

from sqlalchemy import select

from fitcheck.models.predictive import (
    HistoricalDeal,
    PredictiveModelState,
    PredictiveSettings,
)
from fitcheck.repositories.base import BaseRepository


class PredictiveRepository(BaseRepository):
    """Historical deals, predictive settings and the model-state singleton."""

    async def get_settings(self) -> PredictiveSettings:
        return await self._singleton(PredictiveSettings)

    async def update_settings(self, **fields: Any) -> PredictiveSettings:
        return await self._apply(await self.get_settings(), **fields)

    async def get_model_state(self) -> PredictiveModelState:
        return await self._singleton(PredictiveModelState)

    async def update_model_state(self, state: PredictiveModelState, **fields: Any) -> PredictiveModelState:
        return await self._apply(state, **fields)

    async def list_deals(self) -> List[HistoricalDeal]:
        result = await self._db.execute(
            select(HistoricalDeal).order_by(HistoricalDeal.closed_at.desc())
        )
        return list(result.scalars().all())

    async def add_deal(self, **kwargs: Any) -> HistoricalDeal:
        return await self._save(HistoricalDeal(**kwargs))
