"""
Ownership resolution.

OwnershipResolver works for any resource whose repository can report an
owner id; PlaceOwnershipService binds it to places.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.repositories import IOwnedResourceRepository
from src.infrastructure.persistence.repositories.place_repo import PlaceRepository


class OwnershipResolver:
    """Resolves whether a user owns a resource"""

    def __init__(self, repository: IOwnedResourceRepository) -> None:
        self.repository = repository

    async def is_owner(self, resource_id: str, user_id: str) -> bool:
        """False when the resource is missing or unowned"""
        if not user_id:
            return False
        owner_id = await self.repository.get_owner_id(resource_id)
        return owner_id is not None and owner_id == user_id


class PlaceOwnershipService(OwnershipResolver):
    """Ownership of places"""

    def __init__(self, db: AsyncSession, place_repo: PlaceRepository | None = None) -> None:
        super().__init__(place_repo or PlaceRepository(db))
