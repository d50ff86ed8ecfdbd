from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.place import Place
from src.infrastructure.persistence.repositories.base import BaseRepository


class PlaceRepository(BaseRepository[Place]):
    """Owner lookups for places."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Place)

    async def get_owner_id(self, place_id: str) -> str | None:
        """Owner of the place, or None when the place is missing or unowned"""
        result = await self.db.execute(select(Place.owner_id).where(Place.id == place_id))
        return result.scalar_one_or_none()
