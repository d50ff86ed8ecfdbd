"""
Repository interfaces (ports) consumed by application services.

Following Dependency Inversion Principle (DIP).
"""

from __future__ import annotations

from typing import Protocol


class IOwnedResourceRepository(Protocol):
    """Any store whose records carry an optional owner"""

    async def get_owner_id(self, resource_id: str) -> str | None:
        """Owner user id, or None when the resource is missing or unowned"""
        ...


class IPermissionRepository(Protocol):
    """Read-side permission graph queries"""

    async def has_permission(self, user_id: str, permission: str) -> bool: ...

    async def has_admin_role(self, user_id: str) -> bool: ...

    async def get_user_permission_keys(self, user_id: str) -> set[str]: ...
