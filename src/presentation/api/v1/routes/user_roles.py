from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from src.application.services.authorization_service import AuthorizationService
from src.application.services.user_role_service import UserRoleService
from src.domain import permissions as catalog
from src.presentation.api.dependencies import (
    get_authz_service, get_current_user_id, get_user_role_service,
    get_user_role_service_transactional, require_permission)
from src.presentation.api.v1.schemas.permission import UserPermissionsResponse
from src.presentation.api.v1.schemas.role import (AssignmentResponse,
                                                  UserRoleAssign,
                                                  UserRoleResponse)

router = APIRouter()


@router.get("/users/me/permissions", response_model=UserPermissionsResponse)
async def get_my_permissions(
    current_user_id: Annotated[str, Depends(get_current_user_id)],
    authz_service: Annotated[AuthorizationService, Depends(get_authz_service)],
):
    """Effective permissions of the caller (admins get the whole catalog)"""
    permissions = await authz_service.get_effective_permissions(current_user_id)
    return UserPermissionsResponse(user_id=current_user_id, permissions=sorted(permissions))


@router.get("/users/{user_id}/roles", response_model=list[UserRoleResponse])
async def list_user_roles(
    user_id: str,
    user_role_service: Annotated[UserRoleService, Depends(get_user_role_service)],
    _: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
):
    """Roles held by a user (requires 'roles:manage')"""
    return await user_role_service.list_for_user(user_id)


@router.post(
    "/users/{user_id}/roles",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_role_to_user(
    user_id: str,
    data: UserRoleAssign,
    response: Response,
    user_role_service: Annotated[UserRoleService, Depends(get_user_role_service_transactional)],
    actor_id: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
):
    """Assign role to user (requires 'roles:manage'). 200 if already assigned."""
    result = await user_role_service.assign(actor_id, user_id, data.role_id)
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result


@router.delete("/users/{user_id}/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_role_from_user(
    user_id: str,
    role_id: str,
    user_role_service: Annotated[UserRoleService, Depends(get_user_role_service_transactional)],
    actor_id: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
):
    """Remove role from user (requires 'roles:manage')"""
    await user_role_service.unassign(actor_id, user_id, role_id)
