from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.application.services.role_audit_service import RoleAuditService
from src.domain import permissions as catalog
from src.presentation.api.dependencies import (get_role_audit_service,
                                               require_permission)
from src.presentation.api.v1.schemas.audit import (RoleAuditEntryResponse,
                                                   RoleAuditListResponse)
from src.presentation.api.v1.schemas.role import PageMeta
from src.shared.utils import normalize_page

router = APIRouter()


@router.get("/audit", response_model=RoleAuditListResponse)
async def list_role_audit(
    audit_service: Annotated[RoleAuditService, Depends(get_role_audit_service)],
    _: Annotated[str, Depends(require_permission(catalog.ROLES_MANAGE))],
    user_id: str | None = Query(None, description="Target user"),
    role_id: str | None = Query(None),
    action: str | None = Query(None, description="'assign' or 'remove'"),
    page: int = Query(1),
    limit: int | None = Query(None),
):
    """Role assignment history, newest first (requires 'roles:manage')"""
    entries, total = await audit_service.list_entries(
        user_id=user_id, role_id=role_id, action=action, page=page, limit=limit
    )
    window = normalize_page(page, limit)
    return RoleAuditListResponse(
        data=[RoleAuditEntryResponse.model_validate(entry) for entry in entries],
        meta=PageMeta(page=window.page, limit=window.limit, total=total),
    )
