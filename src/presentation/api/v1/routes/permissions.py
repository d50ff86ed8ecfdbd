from typing import Annotated

from fastapi import APIRouter, Depends

from src.domain import permissions as catalog
from src.presentation.api.dependencies import get_current_user_id
from src.presentation.api.v1.schemas.permission import PermissionResponse

router = APIRouter()


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    _: Annotated[str, Depends(get_current_user_id)],
):
    """The fixed permission catalog"""
    return [PermissionResponse.model_validate(p) for p in catalog.all_permissions()]
