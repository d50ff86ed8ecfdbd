""" Repository module for the persistence layer. """

from src.infrastructure.persistence.repositories.base import BaseRepository
from src.infrastructure.persistence.repositories.permission_repo import PermissionRepository
from src.infrastructure.persistence.repositories.place_repo import PlaceRepository
from src.infrastructure.persistence.repositories.role_audit_repo import RoleAuditRepository
from src.infrastructure.persistence.repositories.role_repo import RoleRepository
from src.infrastructure.persistence.repositories.user_repo import UserRepository
from src.infrastructure.persistence.repositories.user_role_repo import UserRoleRepository

__all__ = [
    "BaseRepository",
    "PermissionRepository",
    "PlaceRepository",
    "RoleAuditRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
]
