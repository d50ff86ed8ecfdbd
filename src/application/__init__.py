"""
Application layer - Application Business Rules.

This layer contains application-specific business rules, including:
- Interfaces (ports) for infrastructure dependencies
- Application services for roles, assignments and authorization decisions
"""

from src.application.interfaces import (IOwnedResourceRepository,
                                        IOwnershipResolver,
                                        IPermissionEvaluator,
                                        IPermissionRepository)
from src.application.services import (AuthorizationGuard,
                                      AuthorizationService, OwnershipResolver,
                                      PlaceOwnershipService, RoleAuditService,
                                      RoleService, UserRoleService)

__all__ = [
    # Interfaces
    "IPermissionEvaluator",
    "IOwnershipResolver",
    "IOwnedResourceRepository",
    "IPermissionRepository",
    # Services
    "AuthorizationService",
    "AuthorizationGuard",
    "OwnershipResolver",
    "PlaceOwnershipService",
    "RoleService",
    "UserRoleService",
    "RoleAuditService",
]
