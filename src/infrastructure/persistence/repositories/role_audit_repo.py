from __future__ import annotations

from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.role_audit_log import RoleAuditLog
from src.infrastructure.persistence.repositories.base import BaseRepository


class RoleAuditRepository(BaseRepository[RoleAuditLog]):
    """Append-only access to role_audit_log."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, RoleAuditLog)

    async def append(
        self,
        *,
        actor_id: str,
        action: str,
        target_user_id: str,
        role_id: str,
        role_slug: str,
    ) -> RoleAuditLog:
        """Write one audit row"""
        entry = RoleAuditLog(
            actor_id=actor_id,
            action=action,
            target_user_id=target_user_id,
            role_id=role_id,
            role_slug=role_slug,
        )
        return await self.create(entry)

    @staticmethod
    def _filtered(query: Select, filters: dict[str, Any]) -> Select:
        if filters.get("user_id"):
            query = query.where(RoleAuditLog.target_user_id == filters["user_id"])
        if filters.get("role_id"):
            query = query.where(RoleAuditLog.role_id == filters["role_id"])
        if filters.get("action"):
            query = query.where(RoleAuditLog.action == filters["action"])
        return query

    async def list_entries(
        self,
        *,
        user_id: str | None = None,
        role_id: str | None = None,
        action: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[RoleAuditLog]:
        """Filtered entries, newest first"""
        filters = {"user_id": user_id, "role_id": role_id, "action": action}
        query = (
            self._filtered(select(RoleAuditLog), filters)
            .order_by(RoleAuditLog.created_at.desc(), RoleAuditLog.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_entries(
        self,
        *,
        user_id: str | None = None,
        role_id: str | None = None,
        action: str | None = None,
    ) -> int:
        filters = {"user_id": user_id, "role_id": role_id, "action": action}
        query = self._filtered(select(func.count()).select_from(RoleAuditLog), filters)
        result = await self.db.execute(query)
        return result.scalar_one()
