from datetime import datetime

from pydantic import BaseModel, ConfigDict

from src.presentation.api.v1.schemas.role import PageMeta


class AuditUserRef(BaseModel):
    id: str
    name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class AuditRoleRef(BaseModel):
    id: str
    slug: str
    name: str | None = None  # None once the role has been deleted

    model_config = ConfigDict(from_attributes=True)


class RoleAuditEntryResponse(BaseModel):
    """One role assignment change"""

    id: str
    action: str
    actor: AuditUserRef
    target_user: AuditUserRef
    role: AuditRoleRef
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoleAuditListResponse(BaseModel):
    data: list[RoleAuditEntryResponse]
    meta: PageMeta
