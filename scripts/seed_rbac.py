"""
Seed default RBAC roles and their permissions.

Safe to run repeatedly: roles and role-permission rows are created only
when missing, and existing rows are left untouched.

Usage:
    python -m scripts.seed_rbac
"""
import asyncio
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain import permissions as catalog
from src.domain.entities.role import ADMIN_ROLE_SLUG
from src.infrastructure.persistence.database import AsyncSessionLocal
from src.infrastructure.persistence.models.permission import (RolePermission,
                                                              UserRole)
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.models.user import User


class RoleData(TypedDict):
    """Type definition for role configuration"""

    name: str
    permissions: list[str]
    is_system: bool


DEFAULT_ROLE_SLUG = "client"

DEFAULT_ROLES: dict[str, RoleData] = {
    ADMIN_ROLE_SLUG: {
        "name": "Administrator",
        # Bookkeeping only: the admin slug already grants everything
        "permissions": sorted(catalog.all_keys()),
        "is_system": True,
    },
    "editor": {
        "name": "Editor",
        "permissions": [
            catalog.PLACES_READ,
            catalog.PLACES_WRITE,
            catalog.PLACE_TYPES_READ,
            catalog.PLACE_TYPES_WRITE,
            catalog.PLANS_READ,
            catalog.PLANS_WRITE,
            catalog.USERS_READ,
        ],
        "is_system": False,
    },
    DEFAULT_ROLE_SLUG: {
        "name": "Client",
        "permissions": [
            catalog.PLACES_READ,
            catalog.PLACE_TYPES_READ,
            catalog.PLANS_READ,
            catalog.PLANS_WRITE,
            catalog.PLANS_DELETE,
        ],
        "is_system": False,
    },
    "owner": {
        "name": "Owner",
        "permissions": [catalog.PLACES_READ, catalog.PLACES_OWN, catalog.PLACE_TYPES_READ],
        "is_system": False,
    },
}


async def ensure_role(db: AsyncSession, slug: str, data: RoleData) -> Role:
    """Fetch the live role with this slug, creating it if missing"""
    query = select(Role).where(Role.slug == slug, Role.deleted_at.is_(None))
    existing = (await db.execute(query)).scalar_one_or_none()
    if existing:
        print(f"  ℹ Role already exists: {slug}")
        return existing

    try:
        async with db.begin_nested():
            role = Role(slug=slug, name=data["name"], is_system=data["is_system"])
            db.add(role)
            await db.flush()
    except IntegrityError:
        # Concurrent seeder won the race; use its row
        return (await db.execute(query)).scalar_one()

    print(f"  ✓ Created role: {slug} ({data['name']})")
    return role


async def ensure_role_permissions(db: AsyncSession, role_id: str, keys: list[str]) -> int:
    """Create missing (role, permission) rows one by one. Returns rows created."""
    created = 0
    for key in keys:
        result = await db.execute(
            select(RolePermission.id).where(
                RolePermission.role_id == role_id, RolePermission.permission == key
            )
        )
        if result.scalar_one_or_none():
            continue
        try:
            async with db.begin_nested():
                db.add(RolePermission(role_id=role_id, permission=key))
                await db.flush()
        except IntegrityError:
            continue
        created += 1
    return created


async def assign_default_role(db: AsyncSession, role_id: str) -> int:
    """Give the default role to every live user that holds no role at all"""
    result = await db.execute(
        select(User.id)
        .outerjoin(UserRole, UserRole.user_id == User.id)
        .where(User.deleted_at.is_(None), UserRole.id.is_(None))
    )
    user_ids = list(result.scalars().all())
    for user_id in user_ids:
        db.add(UserRole(user_id=user_id, role_id=role_id, assigned_by=None))
    if user_ids:
        await db.flush()
    return len(user_ids)


async def seed_rbac(db: AsyncSession) -> dict[str, Role]:
    """Ensure every default role and its permissions. Returns roles by slug."""
    roles: dict[str, Role] = {}
    for slug, data in DEFAULT_ROLES.items():
        role = await ensure_role(db, slug, data)
        created = await ensure_role_permissions(db, role.id, data["permissions"])
        if created:
            print(f"    ✓ Added {created} permission(s) to {slug}")
        roles[slug] = role

    assigned = await assign_default_role(db, roles[DEFAULT_ROLE_SLUG].id)
    if assigned:
        print(f"  ✓ Assigned {DEFAULT_ROLE_SLUG} role to {assigned} user(s) with no roles")
    return roles


async def main():
    """Seed RBAC defaults"""
    print("🌱 Seeding RBAC roles and permissions...\n")
    async with AsyncSessionLocal() as db:
        async with db.begin():
            await seed_rbac(db)
    print("\n✅ RBAC seeding complete!")


if __name__ == "__main__":
    asyncio.run(main())
