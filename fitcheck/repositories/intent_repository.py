from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import select

from fitcheck.models.intent import FirstPartySignal, IntentSettings, ThirdPartySignal
from fitcheck.repositories.base import BaseRepository


class IntentRepository(BaseRepository):
    """Intent settings plus first- and third-party signal tables."""

    async def find_settings(self) -> Optional[IntentSettings]:
        result = await self._db.execute(select(IntentSettings).limit(1))
        return result.scalar_one_or_none()

    async def get_settings(self) -> IntentSettings:
        return await self._singleton(IntentSettings)

    async def update_settings(self, **fields: Any) -> IntentSettings:
        return await self._apply(await self.get_settings(), **fields)

    # ------------------------------------------------------------------
    # First-party signals
    # ------------------------------------------------------------------

    async def list_first_party(self, lead_id: str) -> List[FirstPartySignal]:
        result = await self._db.execute(
            select(FirstPartySignal)
            .where(FirstPartySignal.lead_id == lead_id)
            .order_by(FirstPartySignal.observed_at.desc())
        )
        return list(result.scalars().all())

    async def find_latest_first_party(
        self, lead_id: str, signal_type: str, page_url: Optional[str]
    ) -> Optional[FirstPartySignal]:
        """Most recent signal for the same lead, type and page (``None`` page matches ``None``)."""
        page_clause = (
            FirstPartySignal.page_url.is_(None)
            if not page_url
            else FirstPartySignal.page_url == page_url
        )
        result = await self._db.execute(
            select(FirstPartySignal)
            .where(
                FirstPartySignal.lead_id == lead_id,
                FirstPartySignal.signal_type == signal_type,
                page_clause,
            )
            .order_by(FirstPartySignal.observed_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_first_party(self, signal_id: UUID) -> Optional[FirstPartySignal]:
        result = await self._db.execute(
            select(FirstPartySignal).where(FirstPartySignal.id == signal_id)
        )
        return result.scalar_one_or_none()

    async def add_first_party(self, **kwargs: Any) -> FirstPartySignal:
        return await self._save(FirstPartySignal(**kwargs))

    async def add_first_party_many(self, rows: List[dict]) -> List[FirstPartySignal]:
        signals = [FirstPartySignal(**row) for row in rows]
        self._db.add_all(signals)
        await self._db.flush()
        for signal in signals:
            await self._db.refresh(signal)
        return signals

    async def update_first_party(self, signal: FirstPartySignal, **fields: Any) -> FirstPartySignal:
        return await self._apply(signal, **fields)

    # ------------------------------------------------------------------
    # Third-party signals
    # ------------------------------------------------------------------

    async def list_third_party(self, lead_id: str) -> List[ThirdPartySignal]:
        result = await self._db.execute(
            select(ThirdPartySignal)
            .where(ThirdPartySignal.lead_id == lead_id)
            .order_by(ThirdPartySignal.observed_at.desc())
        )
        return list(result.scalars().all())

    async def get_third_party(self, signal_id: UUID) -> Optional[ThirdPartySignal]:
        result = await self._db.execute(
            select(ThirdPartySignal).where(ThirdPartySignal.id == signal_id)
        )
        return result.scalar_one_or_none()

    async def add_third_party(self, **kwargs: Any) -> ThirdPartySignal:
        return await self._save(ThirdPartySignal(**kwargs))

    async def delete_signal(self, signal) -> None:
        await self._db.delete(signal)
        await self._db.flush()
