"""
Assignment manager: grants and revokes roles with an audit row per change.

Assignment is idempotent. A grant and its audit row are written in the same
savepoint, so either both exist or neither does. Cached permission
summaries are dropped only after the surrounding transaction commits.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.exceptions import (AssignmentNotFoundError, RoleNotFoundError,
                                   UnauthorizedError, UserNotFoundError)
from src.infrastructure.persistence.database import on_commit
from src.infrastructure.persistence.models.permission import UserRole
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.repositories.role_audit_repo import RoleAuditRepository
from src.infrastructure.persistence.repositories.role_repo import RoleRepository
from src.infrastructure.persistence.repositories.user_repo import UserRepository
from src.infrastructure.persistence.repositories.user_role_repo import UserRoleRepository
from src.shared.enums import RoleAuditAction
from src.shared.telemetry.logging import get_logger
from src.shared.utils import ensure_utc

if TYPE_CHECKING:
    from src.application.services.authorization_service import AuthorizationService

logger = get_logger(__name__)


@dataclass
class AssignmentResult:
    """Outcome of assign; created is False when the grant already existed"""

    user_id: str
    role_id: str
    role_slug: str
    role_name: str
    assigned_at: datetime
    created: bool


@dataclass
class UserRoleItem:
    role_id: str
    slug: str
    name: str
    is_system: bool
    assigned_at: datetime


class UserRoleService:
    """Role assignment with paired audit rows"""

    def __init__(
        self,
        db: AsyncSession,
        authorization_service: "AuthorizationService | None" = None,
    ) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.role_repo = RoleRepository(db)
        self.user_role_repo = UserRoleRepository(db)
        self.audit_repo = RoleAuditRepository(db)
        self.authorization_service = authorization_service

    async def assign(self, actor_id: str, target_user_id: str, role_id: str) -> AssignmentResult:
        """
        Grant role_id to target_user_id.

        Re-assigning returns the existing grant with created=False and writes
        no audit row. A concurrent assign that loses the unique-constraint race
        returns the winner's grant the same way.

        Raises:
            UserNotFoundError: target user is absent
            RoleNotFoundError: role is absent or deleted
        """
        if not actor_id:
            raise UnauthorizedError()
        if await self.user_repo.get_live_by_id(target_user_id) is None:
            raise UserNotFoundError(target_user_id)
        role = await self.role_repo.get_live_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)

        existing = await self.user_role_repo.get(target_user_id, role_id)
        if existing is not None:
            return self._result(existing, role, created=False)

        try:
            async with self.db.begin_nested():
                grant = await self.user_role_repo.create(
                    UserRole(user_id=target_user_id, role_id=role_id, assigned_by=actor_id)
                )
                await self.audit_repo.append(
                    actor_id=actor_id,
                    action=RoleAuditAction.ASSIGN.value,
                    target_user_id=target_user_id,
                    role_id=role_id,
                    role_slug=role.slug,
                )
        except IntegrityError:
            # Another writer created the grant between our read and insert
            existing = await self.user_role_repo.get(target_user_id, role_id)
            if existing is None:
                raise
            return self._result(existing, role, created=False)

        logger.info(f"Role {role.slug} assigned to user {target_user_id} by {actor_id}")
        if self.authorization_service:
            invalidate = partial(self.authorization_service.invalidate_user_cache, target_user_id)
            on_commit(self.db, invalidate)
        return self._result(grant, role, created=True)

    async def unassign(self, actor_id: str, target_user_id: str, role_id: str) -> None:
        """
        Revoke role_id from target_user_id. Deleted roles may still be revoked.

        Raises:
            AssignmentNotFoundError: the user does not hold the role
            RoleNotFoundError: the role row no longer exists at all
        """
        if not actor_id:
            raise UnauthorizedError()
        grant = await self.user_role_repo.get(target_user_id, role_id)
        if grant is None:
            raise AssignmentNotFoundError(target_user_id, role_id)
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)

        async with self.db.begin_nested():
            await self.user_role_repo.delete(grant)
            await self.audit_repo.append(
                actor_id=actor_id,
                action=RoleAuditAction.REMOVE.value,
                target_user_id=target_user_id,
                role_id=role_id,
                role_slug=role.slug,
            )

        logger.info(f"Role {role.slug} removed from user {target_user_id} by {actor_id}")
        if self.authorization_service:
            invalidate = partial(self.authorization_service.invalidate_user_cache, target_user_id)
            on_commit(self.db, invalidate)

    async def list_for_user(self, user_id: str) -> list[UserRoleItem]:
        """Live roles held by the user, in assignment order"""
        if await self.user_repo.get_live_by_id(user_id) is None:
            raise UserNotFoundError(user_id)
        rows = await self.user_role_repo.list_with_live_roles(user_id)
        return [
            UserRoleItem(
                role_id=role.id,
                slug=role.slug,
                name=role.name,
                is_system=role.is_system,
                assigned_at=ensure_utc(grant.assigned_at),
            )
            for grant, role in rows
        ]

    @staticmethod
    def _result(grant: UserRole, role: Role, created: bool) -> AssignmentResult:
        return AssignmentResult(
            user_id=grant.user_id,
            role_id=role.id,
            role_slug=role.slug,
            role_name=role.name,
            assigned_at=ensure_utc(grant.assigned_at),
            created=created,
        )
