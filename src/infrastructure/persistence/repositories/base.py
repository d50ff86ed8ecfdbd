from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import object_session

from src.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """
    Base repository implementing common persistence operations (LSP).

    Repositories only flush; committing belongs to the caller's unit of work
    (see get_db_transactional). Soft-deletable models get live-row helpers.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]):
        self.db = db
        self.model = model

    def _live(self, query: Select) -> Select:
        """Restrict a query to rows without a tombstone"""
        # Cast to Any for SQLAlchemy dynamic attribute access (deleted_at comes from SoftDeleteMixin)
        model: Any = self.model
        return query.where(model.deleted_at.is_(None))

    async def get_by_id(self, id: str) -> ModelType | None:
        """Get a single record by ID, tombstoned or not"""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == id))
        return result.scalar_one_or_none()

    async def get_live_by_id(self, id: str) -> ModelType | None:
        """Get a single live record by ID"""
        model: Any = self.model
        result = await self.db.execute(self._live(select(self.model).where(model.id == id)))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Add a new record and load its server-side defaults"""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """
        Flush pending changes on a record and reload it.

        Handles potentially detached objects by merging back to session.
        """
        if object_session(obj) is None:
            obj = await self.db.merge(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Hard-delete a record"""
        await self.db.delete(obj)
        await self.db.flush()
