from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PageMeta(BaseModel):
    page: int
    limit: int
    total: int


# Role Schemas
class RoleCreate(BaseModel):
    """Schema for creating a role"""

    slug: str = Field(..., max_length=100, description="Immutable business key, e.g. 'editor'")
    name: str = Field(..., max_length=255, description="Display name")
    permissions: list[str] = Field(
        default_factory=list, description="Catalog permission keys, e.g. 'places:read'"
    )


class RoleUpdate(BaseModel):
    """Schema for updating a role; omitted fields are left unchanged"""

    name: str | None = Field(None, max_length=255)
    permissions: list[str] | None = Field(
        None, description="Replaces the whole permission set when provided"
    )


class RoleResponse(BaseModel):
    """Schema for role response"""

    id: str
    slug: str
    name: str
    is_system: bool
    permissions: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoleListResponse(BaseModel):
    data: list[RoleResponse]
    meta: PageMeta


# User Role Schemas
class UserRoleAssign(BaseModel):
    """Schema for assigning a role to a user"""

    role_id: str = Field(..., min_length=1)


class UserRoleResponse(BaseModel):
    """A role held by a user"""

    role_id: str
    slug: str
    name: str
    is_system: bool
    assigned_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AssignmentResponse(BaseModel):
    """Result of an assignment; created is False when already assigned"""

    user_id: str
    role_id: str
    role_slug: str
    role_name: str
    assigned_at: datetime
    created: bool

    model_config = ConfigDict(from_attributes=True)
