"""Read side of the role assignment audit trail."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.exceptions import ValidationException
from src.infrastructure.persistence.repositories.role_audit_repo import RoleAuditRepository
from src.infrastructure.persistence.repositories.role_repo import RoleRepository
from src.infrastructure.persistence.repositories.user_repo import UserRepository
from src.shared.enums import RoleAuditAction
from src.shared.utils import ensure_utc, normalize_page


@dataclass
class UserRef:
    id: str
    name: str | None


@dataclass
class RoleRef:
    id: str
    slug: str  # as recorded when the entry was written
    name: str | None  # current name; None once the role is deleted


@dataclass
class AuditEntry:
    id: str
    action: str
    actor: UserRef
    target_user: UserRef
    role: RoleRef
    created_at: datetime


class RoleAuditService:
    """Filtered, paginated audit reads enriched with display names"""

    def __init__(self, db: AsyncSession) -> None:
        self.audit_repo = RoleAuditRepository(db)
        self.user_repo = UserRepository(db)
        self.role_repo = RoleRepository(db)

    async def list_entries(
        self,
        user_id: str | None = None,
        role_id: str | None = None,
        action: str | None = None,
        page: int | None = 1,
        limit: int | None = None,
    ) -> tuple[list[AuditEntry], int]:
        """
        Newest-first audit entries with the total matching count.

        Raises:
            ValidationException: action is not 'assign' or 'remove'
        """
        if action and action not in RoleAuditAction.values():
            raise ValidationException(
                "action must be one of: " + ", ".join(RoleAuditAction.values()), field="action"
            )

        window = normalize_page(page, limit)
        filters = {"user_id": user_id, "role_id": role_id, "action": action or None}
        rows = await self.audit_repo.list_entries(**filters, skip=window.offset, limit=window.limit)
        total = await self.audit_repo.count_entries(**filters)

        user_names = await self.user_repo.get_display_names(
            {row.actor_id for row in rows} | {row.target_user_id for row in rows}
        )
        role_names = await self.role_repo.get_live_names(row.role_id for row in rows)

        entries = [
            AuditEntry(
                id=row.id,
                action=row.action,
                actor=UserRef(id=row.actor_id, name=user_names.get(row.actor_id)),
                target_user=UserRef(
                    id=row.target_user_id, name=user_names.get(row.target_user_id)
                ),
                role=RoleRef(id=row.role_id, slug=row.role_slug, name=role_names.get(row.role_id)),
                created_at=ensure_utc(row.created_at),
            )
            for row in rows
        ]
        return entries, total
