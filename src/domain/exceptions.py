"""
Domain exceptions for the Bastion authorization core.

This module defines domain-level exceptions that represent business rule violations.
Each exception class carries the HTTP status and machine code it maps to, so every
endpoint reports a given failure the same way. These exceptions are independent of
infrastructure concerns.
"""

from collections.abc import Iterable
from typing import Any


class BastionException(Exception):
    """
    Base exception for all Bastion errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code for API responses
        details: Additional error context
    """

    status_code: int = 500
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(BastionException):
    """Raised when input validation fails."""

    status_code = 400
    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, details=details)


class PermissionInvalidError(BastionException):
    """Raised when a permission key is not in the catalog."""

    status_code = 422
    default_code = "UNPROCESSABLE"

    def __init__(self, keys: Iterable[str]):
        keys = list(keys)
        super().__init__(
            "permission not in catalog: " + ", ".join(keys),
            details={"permissions": keys},
        )


# Not found family
class ResourceNotFoundException(BastionException):
    """Raised when a requested resource is not found."""

    status_code = 404
    default_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str, message: str | None = None):
        super().__init__(
            message or f"{resource_type} not found: {resource_id}",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class RoleNotFoundError(ResourceNotFoundException):
    """Role is absent or soft-deleted."""

    def __init__(self, role_id: str):
        super().__init__("role", role_id, "role not found")


class UserNotFoundError(ResourceNotFoundException):
    """User is absent."""

    def __init__(self, user_id: str):
        super().__init__("user", user_id, "user not found")


class AssignmentNotFoundError(ResourceNotFoundException):
    """User does not currently hold the role."""

    def __init__(self, user_id: str, role_id: str):
        super().__init__(
            "user_role", f"{user_id}:{role_id}", "user role assignment not found"
        )
        self.details.update({"user_id": user_id, "role_id": role_id})


# Conflict family
class ConflictError(BastionException):
    """Raised on storage-level uniqueness violations."""

    status_code = 409
    default_code = "CONFLICT"

    def __init__(self, message: str = "resource already exists", details: dict[str, Any] | None = None):
        super().__init__(message, details=details)


class RoleSlugConflictError(ConflictError):
    """A live role already uses the slug."""

    def __init__(self, slug: str):
        super().__init__("role slug already exists", {"slug": slug})


class RoleNameConflictError(ConflictError):
    """A live role already uses the name."""

    def __init__(self, name: str):
        super().__init__("role name already exists", {"name": name})


class SystemRoleProtectedError(BastionException):
    """System roles cannot be deleted or lose permissions."""

    status_code = 403
    default_code = "FORBIDDEN"

    def __init__(self, role_id: str, removed: Iterable[str] = ()):
        details: dict[str, Any] = {"role_id": role_id}
        removed = sorted(removed)
        if removed:
            details["removed_permissions"] = removed
        super().__init__(
            "system role cannot be deleted or have permissions reduced", details=details
        )


class UnauthorizedError(BastionException):
    """Caller identity is missing or invalid."""

    status_code = 401
    default_code = "UNAUTHORIZED"

    def __init__(self, message: str = "user not authenticated"):
        super().__init__(message)


class PermissionDeniedError(BastionException):
    """Permission denied - user lacks required permission or ownership."""

    status_code = 403
    default_code = "FORBIDDEN"

    def __init__(
        self,
        message: str = "Insufficient permissions",
        permission: str | None = None,
        resource_id: str | None = None,
    ):
        details: dict[str, Any] = {}
        if permission:
            details["permission"] = permission
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message, details=details)


class InternalError(BastionException):
    """Storage or infrastructure failure."""

    def __init__(self, message: str = "internal error"):
        super().__init__(message)


class AuthorizationCheckError(InternalError):
    """The permission or ownership check itself failed (not a policy denial)."""

    def __init__(self, check: str):
        super().__init__(f"{check} check failed")
        self.details = {"check": check}
