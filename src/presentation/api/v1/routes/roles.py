from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.application.services.role_service import RoleService
from src.domain import permissions as catalog
from src.presentation.api.dependencies import (get_role_service,
                                               get_role_service_transactional,
                                               require_permission)
from src.presentation.api.v1.schemas.role import (PageMeta, RoleCreate,
                                                  RoleListResponse,
                                                  RoleResponse, RoleUpdate)
from src.shared.utils import normalize_page

router = APIRouter()


@router.get("", response_model=RoleListResponse)
async def list_roles(
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
    page: int = Query(1),
    limit: int | None = Query(None),
):
    """List live roles (requires 'roles:manage')"""
    roles, total = await role_service.list(page=page, limit=limit)
    window = normalize_page(page, limit)
    return RoleListResponse(
        data=[RoleResponse.model_validate(role) for role in roles],
        meta=PageMeta(page=window.page, limit=window.limit, total=total),
    )


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    data: RoleCreate,
    role_service: Annotated[RoleService, Depends(get_role_service_transactional)],
    _: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
):
    """Create a role with its permission set (requires 'roles:manage')"""
    return await role_service.create(data.slug, data.name, data.permissions)


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
):
    return await role_service.get_by_id(role_id)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: str,
    data: RoleUpdate,
    role_service: Annotated[RoleService, Depends(get_role_service_transactional)],
    _: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
):
    """Rename a role and/or replace its permissions (requires 'roles:manage')"""
    return await role_service.update(role_id, name=data.name, permissions=data.permissions)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: str,
    role_service: Annotated[RoleService, Depends(get_role_service_transactional)],
    _: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
):
    """Soft-delete a non-system role (requires 'roles:manage')"""
    await role_service.delete(role_id)
