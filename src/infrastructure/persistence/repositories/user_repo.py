from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.user import User
from src.infrastructure.persistence.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Read-only lookups on users owned by the identity service."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_display_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        """Map user id -> display name (name, falling back to username)"""
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.name, User.username).where(User.id.in_(ids))
        )
        return {row.id: row.name or row.username for row in result}
