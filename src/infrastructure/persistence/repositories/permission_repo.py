from __future__ import annotations

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities.role import ADMIN_ROLE_SLUG
from src.infrastructure.persistence.models.permission import (RolePermission,
                                                              UserRole)
from src.infrastructure.persistence.models.role import Role


class PermissionRepository:
    """
    Read-side queries over the user -> role -> permission graph.

    Only live roles count. A live role with the reserved admin slug grants
    every permission regardless of its permission rows.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def has_permission(self, user_id: str, permission: str) -> bool:
        """Single EXISTS query: explicit grant or admin role"""
        granting = (
            select(UserRole.id)
            .join(Role, Role.id == UserRole.role_id)
            .outerjoin(
                RolePermission,
                and_(
                    RolePermission.role_id == Role.id,
                    RolePermission.permission == permission,
                ),
            )
            .where(
                UserRole.user_id == user_id,
                Role.deleted_at.is_(None),
                or_(Role.slug == ADMIN_ROLE_SLUG, RolePermission.id.is_not(None)),
            )
        )
        result = await self.db.execute(select(granting.exists()))
        return bool(result.scalar())

    async def has_admin_role(self, user_id: str) -> bool:
        admin = (
            select(UserRole.id)
            .join(Role, Role.id == UserRole.role_id)
            .where(
                UserRole.user_id == user_id,
                Role.slug == ADMIN_ROLE_SLUG,
                Role.deleted_at.is_(None),
            )
        )
        result = await self.db.execute(select(admin.exists()))
        return bool(result.scalar())

    async def get_user_permission_keys(self, user_id: str) -> set[str]:
        """Permission keys explicitly granted by the user's live roles"""
        result = await self.db.execute(
            select(RolePermission.permission)
            .distinct()
            .join(Role, Role.id == RolePermission.role_id)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id, Role.deleted_at.is_(None))
        )
        return set(result.scalars().all())
