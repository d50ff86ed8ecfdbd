from typing import Annotated

from fastapi import APIRouter, Depends

from src.domain import permissions as catalog
from src.presentation.api.dependencies import require_place_ownership_or_permission
from src.presentation.api.v1.schemas.place import PlaceAccessResponse

router = APIRouter()


@router.get("/{place_id}/access", response_model=PlaceAccessResponse)
async def check_place_write_access(
    place_id: str,
    user_id: Annotated[
        str,
        Depends(require_place_ownership_or_permission(catalog.PLACES_WRITE, catalog.PLACES_OWN)),
    ],
):
    """
    Write access to a place: 'places:write', or 'places:own' plus ownership.
    """
    return PlaceAccessResponse(place_id=place_id, user_id=user_id)
