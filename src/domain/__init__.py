"""
Domain layer - Enterprise Business Rules.

This is the innermost layer containing the permission catalog, business
entities, value objects, and domain exceptions. It has no dependencies on
other layers.
"""

from src.domain.entities import ADMIN_ROLE_SLUG, RoleEntity
from src.domain.exceptions import (AssignmentNotFoundError,
                                   AuthorizationCheckError, BastionException,
                                   ConflictError, InternalError,
                                   PermissionDeniedError,
                                   PermissionInvalidError,
                                   ResourceNotFoundException,
                                   RoleNameConflictError, RoleNotFoundError,
                                   RoleSlugConflictError,
                                   SystemRoleProtectedError,
                                   UnauthorizedError, UserNotFoundError,
                                   ValidationException)
from src.domain.value_objects import RoleSlug

__all__ = [
    # Entities
    "RoleEntity",
    "ADMIN_ROLE_SLUG",
    # Value Objects
    "RoleSlug",
    # Exceptions
    "BastionException",
    "ValidationException",
    "PermissionInvalidError",
    "ResourceNotFoundException",
    "RoleNotFoundError",
    "UserNotFoundError",
    "AssignmentNotFoundError",
    "ConflictError",
    "RoleSlugConflictError",
    "RoleNameConflictError",
    "SystemRoleProtectedError",
    "UnauthorizedError",
    "PermissionDeniedError",
    "InternalError",
    "AuthorizationCheckError",
]
