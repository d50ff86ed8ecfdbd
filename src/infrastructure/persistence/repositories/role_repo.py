from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.permission import RolePermission
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.repositories.base import BaseRepository
from src.shared.utils.datetime import utc_now


class RoleRepository(BaseRepository[Role]):
    """Repository for roles and their permission rows."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Role)

    async def get_live_by_slug(self, slug: str) -> Role | None:
        """Get the live role using a slug"""
        result = await self.db.execute(self._live(select(Role).where(Role.slug == slug)))
        return result.scalar_one_or_none()

    async def get_live_by_name(self, name: str) -> Role | None:
        """Get the live role using a display name"""
        result = await self.db.execute(self._live(select(Role).where(Role.name == name)))
        return result.scalar_one_or_none()

    async def list_live(self, skip: int = 0, limit: int = 20) -> list[Role]:
        """Live roles, oldest first"""
        query = self._live(select(Role)).order_by(Role.created_at, Role.id).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_live(self) -> int:
        result = await self.db.execute(self._live(select(func.count()).select_from(Role)))
        return result.scalar_one()

    async def get_live_names(self, role_ids: Iterable[str]) -> dict[str, str]:
        """Map role id -> current name, live roles only"""
        ids = set(role_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            self._live(select(Role.id, Role.name).where(Role.id.in_(ids)))
        )
        return {row.id: row.name for row in result}

    async def get_permissions(self, role_id: str) -> list[str]:
        """Permission keys granted by one role, sorted"""
        result = await self.db.execute(
            select(RolePermission.permission)
            .where(RolePermission.role_id == role_id)
            .order_by(RolePermission.permission)
        )
        return list(result.scalars().all())

    async def get_permissions_for_roles(self, role_ids: Iterable[str]) -> dict[str, list[str]]:
        """Permission keys per role in a single query"""
        ids = list(role_ids)
        permissions: dict[str, list[str]] = {role_id: [] for role_id in ids}
        if not ids:
            return permissions
        result = await self.db.execute(
            select(RolePermission.role_id, RolePermission.permission)
            .where(RolePermission.role_id.in_(ids))
            .order_by(RolePermission.role_id, RolePermission.permission)
        )
        for row in result:
            permissions[row.role_id].append(row.permission)
        return permissions

    async def add_permissions(self, role_id: str, keys: Iterable[str]) -> None:
        """Insert one row per key"""
        rows = [RolePermission(role_id=role_id, permission=key) for key in keys]
        if rows:
            self.db.add_all(rows)
            await self.db.flush()

    async def replace_permissions(self, role_id: str, keys: Iterable[str]) -> None:
        """Delete every permission row of the role, then insert the new set"""
        await self.db.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        await self.add_permissions(role_id, keys)

    async def soft_delete(self, role: Role) -> Role:
        """Tombstone the role; assignments and audit rows are left in place"""
        role.deleted_at = utc_now()
        return await self.update(role)
