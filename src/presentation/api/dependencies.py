from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.services.authorization_guard import AuthorizationGuard
from src.application.services.authorization_service import AuthorizationService
from src.application.services.ownership_service import PlaceOwnershipService
from src.application.services.role_audit_service import RoleAuditService
from src.application.services.role_service import RoleService
from src.application.services.user_role_service import UserRoleService
from src.domain.exceptions import UnauthorizedError
from src.infrastructure.cache.redis_cache import CacheService
from src.infrastructure.persistence.database import get_db, get_db_transactional
from src.infrastructure.security.jwt import get_subject

# auto_error=False so a missing header gets the same 401 body as a bad token
security = HTTPBearer(auto_error=False)

# Global cache instance (singleton); None while Redis is disabled
_cache_service: CacheService | None = None


async def get_cache_service() -> CacheService | None:
    """
    Cache service dependency (singleton)

    Set on app startup in main.py when Redis is enabled.
    """
    return _cache_service


def set_cache_service(cache_service: CacheService | None):
    """Set global cache service (called on app startup/shutdown)"""
    global _cache_service
    _cache_service = cache_service


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    Validate the bearer token and return the authenticated user id (`sub`).
    """
    if credentials is None:
        raise UnauthorizedError()
    try:
        user_id = get_subject(credentials.credentials)
    except ValueError as e:
        raise UnauthorizedError("invalid authentication credentials") from e
    return user_id


async def get_authz_service(
    db: AsyncSession = Depends(get_db),
    cache: CacheService | None = Depends(get_cache_service),
) -> AuthorizationService:
    """Permission evaluator for manual checks, with optional caching"""
    return AuthorizationService(db, cache_service=cache)


async def get_role_service(
    db: AsyncSession = Depends(get_db),
    authz: AuthorizationService = Depends(get_authz_service),
) -> RoleService:
    return RoleService(db, authorization_service=authz)


async def get_role_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
    authz: AuthorizationService = Depends(get_authz_service),
) -> RoleService:
    """Role service with transaction management (writes)"""
    return RoleService(db, authorization_service=authz)


async def get_user_role_service(
    db: AsyncSession = Depends(get_db),
    authz: AuthorizationService = Depends(get_authz_service),
) -> UserRoleService:
    return UserRoleService(db, authorization_service=authz)


async def get_user_role_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
    authz: AuthorizationService = Depends(get_authz_service),
) -> UserRoleService:
    """Assignment service with transaction management (writes)"""
    return UserRoleService(db, authorization_service=authz)


async def get_role_audit_service(db: AsyncSession = Depends(get_db)) -> RoleAuditService:
    return RoleAuditService(db)


def require_permission(permission: str):
    """
    Dependency factory for route-level permission checking.

    Usage:
        @router.post("/roles", dependencies=[Depends(require_permission("roles:manage"))])
        async def create_role(...):
            ...
    """

    async def permission_checker(
        user_id: str = Depends(get_current_user_id),
        authz_service: AuthorizationService = Depends(get_authz_service),
    ) -> str:
        await AuthorizationGuard(authz_service).require_permission(user_id, permission)
        return user_id

    return permission_checker


def require_place_ownership_or_permission(
    full_permission: str, own_permission: str, param: str = "place_id"
):
    """
    Dependency factory: allow holders of full_permission, or holders of
    own_permission who own the place named by the `param` path parameter.
    """

    async def ownership_checker(
        request: Request,
        user_id: str = Depends(get_current_user_id),
        authz_service: AuthorizationService = Depends(get_authz_service),
        db: AsyncSession = Depends(get_db),
    ) -> str:
        guard = AuthorizationGuard(authz_service, PlaceOwnershipService(db))
        await guard.require_ownership_or_permission(
            user_id,
            request.path_params[param],
            full_permission=full_permission,
            own_permission=own_permission,
        )
        return user_id

    return ownership_checker
