"""
Authorization guard: turns evaluator and resolver answers into allow/deny.

A failing check is never reported as a denial; it surfaces as
AuthorizationCheckError so callers can tell "no" from "could not decide".
"""

from __future__ import annotations

from src.application.interfaces.services import (IOwnershipResolver,
                                                 IPermissionEvaluator)
from src.domain.exceptions import (AuthorizationCheckError, InternalError,
                                   PermissionDeniedError, UnauthorizedError)
from src.shared.telemetry.logging import get_logger
from src.shared.telemetry.tracing import traced

logger = get_logger(__name__)


class AuthorizationGuard:
    def __init__(
        self,
        evaluator: IPermissionEvaluator,
        resolver: IOwnershipResolver | None = None,
    ) -> None:
        self.evaluator = evaluator
        self.resolver = resolver

    @traced("authz.require_permission")
    async def require_permission(self, user_id: str | None, permission: str) -> None:
        """
        Raises:
            UnauthorizedError: no authenticated user
            PermissionDeniedError: the user lacks the permission
            AuthorizationCheckError: the evaluator failed
        """
        if not user_id:
            raise UnauthorizedError()
        if not await self._has_permission(user_id, permission):
            raise PermissionDeniedError(permission=permission)

    @traced("authz.require_ownership_or_permission")
    async def require_ownership_or_permission(
        self,
        user_id: str | None,
        resource_id: str,
        full_permission: str,
        own_permission: str,
    ) -> None:
        """
        Allow when the user holds full_permission; otherwise require both
        own_permission and ownership of the resource. Ownership is only
        resolved when the permission checks leave it as the deciding factor.
        """
        if not user_id:
            raise UnauthorizedError()
        if await self._has_permission(user_id, full_permission):
            return
        if not await self._has_permission(user_id, own_permission):
            raise PermissionDeniedError(permission=own_permission)

        if self.resolver is None:
            raise InternalError("no ownership resolver configured")
        try:
            is_owner = await self.resolver.is_owner(resource_id, user_id)
        except Exception as e:
            logger.error(f"Ownership check failed for {resource_id}: {e}")
            raise AuthorizationCheckError("ownership") from e
        if not is_owner:
            raise PermissionDeniedError(
                "not the owner of this resource", resource_id=resource_id
            )

    async def _has_permission(self, user_id: str, permission: str) -> bool:
        try:
            return await self.evaluator.has_permission(user_id=user_id, permission=permission)
        except Exception as e:
            logger.error(f"Permission check failed for {permission}: {e}")
            raise AuthorizationCheckError("permission") from e
