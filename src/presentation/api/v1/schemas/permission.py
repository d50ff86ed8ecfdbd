from pydantic import BaseModel, ConfigDict


class PermissionResponse(BaseModel):
    """One catalog entry"""

    key: str
    resource: str
    action: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class UserPermissionsResponse(BaseModel):
    """Effective permissions of the authenticated user"""

    user_id: str
    permissions: list[str]
