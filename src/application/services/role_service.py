"""
Role registry: CRUD over roles and their permission sets.

Every write validates permission keys against the catalog before touching
storage, and writes role + permission rows inside one savepoint so a failure
leaves no partial rows behind.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain import permissions as catalog
from src.domain.entities.role import RoleEntity
from src.domain.exceptions import (ConflictError, PermissionInvalidError,
                                   RoleNameConflictError, RoleNotFoundError,
                                   RoleSlugConflictError, ValidationException)
from src.domain.value_objects import RoleSlug
from src.infrastructure.persistence.database import on_commit
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.repositories.role_repo import RoleRepository
from src.shared.telemetry.logging import get_logger
from src.shared.utils import ensure_utc, normalize_page, utc_now

if TYPE_CHECKING:
    from src.application.services.authorization_service import AuthorizationService

logger = get_logger(__name__)


@dataclass
class RoleDTO:
    """Role as returned to callers; permissions sorted"""

    id: str
    slug: str
    name: str
    is_system: bool
    permissions: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, role: Role, permissions: Iterable[str]) -> RoleDTO:
        return cls(
            id=role.id,
            slug=role.slug,
            name=role.name,
            is_system=role.is_system,
            permissions=sorted(permissions),
            created_at=ensure_utc(role.created_at),
            updated_at=ensure_utc(role.updated_at),
        )


def validate_permission_keys(permissions: Iterable[str]) -> list[str]:
    """De-duplicated keys in input order; raises on any non-catalog key"""
    keys = list(dict.fromkeys(permissions))
    invalid = catalog.invalid_keys(keys)
    if invalid:
        raise PermissionInvalidError(invalid)
    return keys


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


class RoleService:
    """
    Role registry service.

    Conflicts are checked up front for clear errors; the partial unique
    indexes remain the backstop against concurrent writers.
    """

    def __init__(
        self,
        db: AsyncSession,
        role_repo: RoleRepository | None = None,
        authorization_service: "AuthorizationService | None" = None,
    ) -> None:
        self.db = db
        self.role_repo = role_repo or RoleRepository(db)
        self.authorization_service = authorization_service

    async def create(self, slug: str, name: str, permissions: list[str]) -> RoleDTO:
        """
        Create a non-system role with the given permission set.

        Raises:
            ValidationException: empty or malformed slug, empty name or permissions
            PermissionInvalidError: a key is not in the catalog
            RoleSlugConflictError / RoleNameConflictError: live duplicate
        """
        slug = str(RoleSlug(slug))
        name = self._validate_name(name)
        if not permissions:
            raise ValidationException("at least one permission is required", field="permissions")
        keys = validate_permission_keys(permissions)

        if await self.role_repo.get_live_by_slug(slug):
            raise RoleSlugConflictError(slug)
        if await self.role_repo.get_live_by_name(name):
            raise RoleNameConflictError(name)

        try:
            async with self.db.begin_nested():
                role = await self.role_repo.create(Role(slug=slug, name=name, is_system=False))
                await self.role_repo.add_permissions(role.id, keys)
        except IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            raise self._classify_conflict(e, slug=slug, name=name) from e

        logger.info(f"Role created: {role.slug} ({role.id}) with {len(keys)} permissions")
        return RoleDTO.from_model(role, keys)

    async def get_by_id(self, role_id: str) -> RoleDTO:
        role = await self._get_live(role_id)
        return RoleDTO.from_model(role, await self.role_repo.get_permissions(role.id))

    async def list(self, page: int | None = 1, limit: int | None = None) -> tuple[list[RoleDTO], int]:
        """Live roles ordered by creation, with the total live count"""
        window = normalize_page(page, limit)
        roles = await self.role_repo.list_live(skip=window.offset, limit=window.limit)
        total = await self.role_repo.count_live()
        permissions = await self.role_repo.get_permissions_for_roles(role.id for role in roles)
        return [RoleDTO.from_model(role, permissions[role.id]) for role in roles], total

    async def update(
        self,
        role_id: str,
        name: str | None = None,
        permissions: list[str] | None = None,
    ) -> RoleDTO:
        """
        Update name and/or replace the permission set; omitted fields are untouched.

        All checks run before any write, so a rejected update changes nothing.

        Raises:
            RoleNotFoundError: absent or deleted role
            RoleNameConflictError: name used by another live role
            PermissionInvalidError: a key is not in the catalog
            SystemRoleProtectedError: new set drops a system role's permission
        """
        role = await self._get_live(role_id)
        current = await self.role_repo.get_permissions(role.id)

        if name is not None:
            name = self._validate_name(name)
            other = await self.role_repo.get_live_by_name(name)
            if other is not None and other.id != role.id:
                raise RoleNameConflictError(name)

        keys: list[str] | None = None
        if permissions is not None:
            keys = validate_permission_keys(permissions)
            # System roles must keep every current key, even against an empty set
            self._to_entity(role, current).ensure_permissions_replaceable(keys)
            if not keys:
                raise ValidationException(
                    "at least one permission is required", field="permissions"
                )

        if name is None and keys is None:
            return RoleDTO.from_model(role, current)

        try:
            async with self.db.begin_nested():
                if name is not None:
                    role.name = name
                if keys is not None:
                    await self.role_repo.replace_permissions(role.id, keys)
                role.updated_at = utc_now()
                role = await self.role_repo.update(role)
        except IntegrityError as e:
            if not _is_unique_violation(e):
                raise
            raise self._classify_conflict(e, name=name) from e

        logger.info(f"Role updated: {role.slug} ({role.id})")
        if keys is not None and self.authorization_service:
            on_commit(self.db, self.authorization_service.invalidate_all_cache)
        return RoleDTO.from_model(role, keys if keys is not None else current)

    async def delete(self, role_id: str) -> None:
        """
        Soft-delete a non-system role. Assignments and audit history stay.

        Raises:
            RoleNotFoundError: absent or already deleted
            SystemRoleProtectedError: role is a system role
        """
        role = await self._get_live(role_id)
        self._to_entity(role).ensure_deletable()
        await self.role_repo.soft_delete(role)

        logger.info(f"Role deleted: {role.slug} ({role.id})")
        if self.authorization_service:
            on_commit(self.db, self.authorization_service.invalidate_all_cache)

    async def _get_live(self, role_id: str) -> Role:
        role = await self.role_repo.get_live_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return role

    @staticmethod
    def _to_entity(role: Role, permissions: Iterable[str] = ()) -> RoleEntity:
        return RoleEntity(
            id=role.id,
            slug=role.slug,
            name=role.name,
            is_system=role.is_system,
            permissions=frozenset(permissions),
        )

    @staticmethod
    def _validate_name(name: str | None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationException("name is required", field="name")
        return name

    @staticmethod
    def _classify_conflict(
        error: IntegrityError, slug: str | None = None, name: str | None = None
    ) -> ConflictError:
        """Map a uniqueness violation to the matching conflict error"""
        message = str(error.orig).lower()
        if slug is not None and "slug" in message:
            return RoleSlugConflictError(slug)
        if name is not None and "name" in message:
            return RoleNameConflictError(name)
        return ConflictError()
