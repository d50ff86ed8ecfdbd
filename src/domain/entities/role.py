"""
Role domain entity.

This represents the business concept of a role, independent of
how it's stored in the database. The system-role protection rules
live here so the service layer and seeding share one definition.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from src.domain.exceptions import SystemRoleProtectedError

# Reserved slug: a live role with this slug implicitly grants every permission.
# Never reuse it for a non-privileged role.
ADMIN_ROLE_SLUG = "admin"


@dataclass
class RoleEntity:
    """
    Domain entity for Role (SRP - business logic separate from persistence)
    """

    id: str
    slug: str
    name: str
    is_system: bool = False
    permissions: frozenset[str] = field(default_factory=frozenset)

    def ensure_deletable(self) -> None:
        """
        Business rule: system roles are never deleted.
        """
        if self.is_system:
            raise SystemRoleProtectedError(self.id)

    def removed_permissions(self, new_permissions: Iterable[str]) -> frozenset[str]:
        """Permissions held now that the new set would drop"""
        return self.permissions - frozenset(new_permissions)

    def ensure_permissions_replaceable(self, new_permissions: Iterable[str]) -> None:
        """
        Business rule: a system role may only gain permissions.
        The new set must be a superset of the current set.
        """
        if not self.is_system:
            return
        removed = self.removed_permissions(new_permissions)
        if removed:
            raise SystemRoleProtectedError(self.id, removed)
