from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.permission import UserRole
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.repositories.base import BaseRepository


class UserRoleRepository(BaseRepository[UserRole]):
    """Repository for user -> role grants."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, UserRole)

    async def get(self, user_id: str, role_id: str) -> UserRole | None:
        """Get the grant for a (user, role) pair"""
        result = await self.db.execute(
            select(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        )
        return result.scalar_one_or_none()

    async def list_with_live_roles(self, user_id: str) -> list[tuple[UserRole, Role]]:
        """User's grants joined to their roles; tombstoned roles omitted"""
        result = await self.db.execute(
            select(UserRole, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id, Role.deleted_at.is_(None))
            .order_by(UserRole.assigned_at, UserRole.id)
        )
        return [(row[0], row[1]) for row in result.all()]
