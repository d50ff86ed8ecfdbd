"""Domain entities."""

from src.domain.entities.role import ADMIN_ROLE_SLUG, RoleEntity

__all__ = [
    "ADMIN_ROLE_SLUG",
    "RoleEntity",
]
