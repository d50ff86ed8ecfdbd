from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.repositories import IPermissionRepository
from src.domain import permissions as catalog
from src.infrastructure.cache.redis_cache import (PERMISSIONS_KEY_PREFIX,
                                                  CacheService,
                                                  permissions_cache_key)
from src.infrastructure.config.settings import get_settings
from src.infrastructure.persistence.repositories.permission_repo import PermissionRepository
from src.shared.telemetry.tracing import add_span_attributes, traced


class AuthorizationService:
    """
    Permission evaluator.
    Follow principle: "Check permissions, not roles" - the admin slug is the
    single exception and is resolved in the permission query itself.

    With a connected CacheService, a per-user summary {admin, permissions}
    is cached for `cache_ttl_permissions` seconds. Without one every call
    reads the database, so grants are visible on the next request.

    Writers queue invalidation with persistence.database.on_commit, so it
    runs only after their transaction has committed.
    """

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheService | None = None,
        permission_repo: IPermissionRepository | None = None,
    ):
        self.db = db
        self.cache = cache_service
        self.permission_repo: IPermissionRepository = permission_repo or PermissionRepository(db)
        self.cache_ttl = get_settings().cache_ttl_permissions

    @traced("authz.has_permission")
    async def has_permission(self, user_id: str, permission: str) -> bool:
        """
        True iff the user holds a live role that grants `permission`
        explicitly or carries the admin slug. False for users with no roles.
        """
        if self._cache_enabled():
            summary = await self._get_summary(user_id)
            allowed = summary["admin"] or permission in summary["permissions"]
        else:
            allowed = await self.permission_repo.has_permission(user_id, permission)
        add_span_attributes(**{"authz.allowed": allowed})
        return allowed

    async def get_user_permissions(self, user_id: str) -> set[str]:
        """
        Permission keys explicitly granted by the user's live roles
        Returns: Set of keys like {'places:read', 'plans:write'}
        """
        if self._cache_enabled():
            return set((await self._get_summary(user_id))["permissions"])
        return await self.permission_repo.get_user_permission_keys(user_id)

    async def get_effective_permissions(self, user_id: str) -> set[str]:
        """Everything the user may do: the whole catalog for admins"""
        if self._cache_enabled():
            summary = await self._get_summary(user_id)
            is_admin = summary["admin"]
            granted = set(summary["permissions"])
        else:
            is_admin = await self.permission_repo.has_admin_role(user_id)
            granted = await self.permission_repo.get_user_permission_keys(user_id)
        if is_admin:
            return set(catalog.all_keys()) | granted
        return granted

    async def invalidate_user_cache(self, user_id: str) -> None:
        """
        Invalidate cached permissions for a specific user

        Call this when the user's roles are assigned or removed.
        """
        if self._cache_enabled():
            await self.cache.delete(permissions_cache_key(user_id))

    async def invalidate_all_cache(self) -> None:
        """
        Invalidate every cached permission summary

        Call this when a role's permission set changes or a role is deleted.
        """
        if self._cache_enabled():
            await self.cache.delete_pattern(f"{PERMISSIONS_KEY_PREFIX}:*")

    def _cache_enabled(self) -> bool:
        return self.cache is not None and self.cache.is_available()

    async def _get_summary(self, user_id: str) -> dict:
        cache_key = permissions_cache_key(user_id)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            return cached

        summary = {
            "admin": await self.permission_repo.has_admin_role(user_id),
            # Sorted list for JSON serialization
            "permissions": sorted(await self.permission_repo.get_user_permission_keys(user_id)),
        }
        await self.cache.set(cache_key, summary, ttl=self.cache_ttl)
        return summary
