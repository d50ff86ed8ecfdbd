"""Application services."""

from src.application.services.authorization_guard import AuthorizationGuard
from src.application.services.authorization_service import AuthorizationService
from src.application.services.ownership_service import (OwnershipResolver,
                                                         PlaceOwnershipService)
from src.application.services.role_audit_service import (AuditEntry,
                                                         RoleAuditService,
                                                         RoleRef, UserRef)
from src.application.services.role_service import RoleDTO, RoleService
from src.application.services.user_role_service import (AssignmentResult,
                                                        UserRoleItem,
                                                        UserRoleService)

__all__ = [
    "AuthorizationService",
    "AuthorizationGuard",
    "OwnershipResolver",
    "PlaceOwnershipService",
    "RoleService",
    "RoleDTO",
    "UserRoleService",
    "AssignmentResult",
    "UserRoleItem",
    "RoleAuditService",
    "AuditEntry",
    "UserRef",
    "RoleRef",
]
