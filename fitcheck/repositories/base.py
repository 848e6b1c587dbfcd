import logging
from typing import Any, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class BaseRepository:
    """Holds the request's ``AsyncSession``.

    Repositories built from the same session share one unit of work;
    services decide when to :meth:`commit`.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def commit(self) -> None:
        await self._db.commit()

    async def _save(self, instance: ModelT) -> ModelT:
        """Flush *instance* and reload server-generated columns."""
        self._db.add(instance)
        await self._db.flush()
        await self._db.refresh(instance)
        return instance

    async def _apply(self, instance: ModelT, **fields: Any) -> ModelT:
        return await self._apply(instance, **fields)

    async def _singleton(self, model: Type[ModelT]) -> ModelT:
        """Return the single row of a settings-style table, creating it if absent."""
        result = await self._db.execute(select(model).limit(1))
        row = result.scalar_one_or_none()
        if row is None:
            logger.info("No %s row found, creating defaults", model.__tablename__)
            row = await self._save(model())
        return row
