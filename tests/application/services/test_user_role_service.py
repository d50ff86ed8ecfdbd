"""Tests for role assignment and its audit trail"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from src.application.services.authorization_service import AuthorizationService
from src.application.services.role_service import RoleService
from src.application.services.user_role_service import UserRoleService
from src.domain.exceptions import (AssignmentNotFoundError, RoleNotFoundError,
                                   UnauthorizedError, UserNotFoundError)
from src.infrastructure.cache.redis_cache import CacheService
from src.infrastructure.persistence.database import run_commit_callbacks
from src.infrastructure.persistence.models import RoleAuditLog, UserRole
from tests.factories import create_role


@pytest.fixture
def user_role_service(test_db):
    return UserRoleService(test_db)


async def audit_rows(db, **filters) -> list[RoleAuditLog]:
    query = select(RoleAuditLog).order_by(RoleAuditLog.created_at)
    for column, value in filters.items():
        query = query.where(getattr(RoleAuditLog, column) == value)
    return list((await db.execute(query)).scalars().all())


async def grant_count(db, user_id: str, role_id: str) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(UserRole)
        .where(UserRole.user_id == user_id, UserRole.role_id == role_id)
    )
    return result.scalar_one()


class TestAssign:
    @pytest.mark.asyncio
    async def test_assign_creates_grant_and_audit(
        self, user_role_service, test_db, admin_user, plain_user, seeded_roles
    ):
        editor = seeded_roles["editor"]

        result = await user_role_service.assign(admin_user.id, plain_user.id, editor.id)

        assert result.created is True
        assert result.role_slug == "editor"
        assert result.role_name == "Editor"
        assert result.assigned_at is not None
        rows = await audit_rows(test_db, target_user_id=plain_user.id)
        assert len(rows) == 1
        assert rows[0].action == "assign"
        assert rows[0].actor_id == admin_user.id
        assert rows[0].role_slug == "editor"

    @pytest.mark.asyncio
    async def test_assign_is_idempotent(
        self, user_role_service, test_db, admin_user, plain_user, seeded_roles
    ):
        """
        GIVEN a role already assigned to a user
        WHEN it is assigned again
        THEN the first grant is returned and no audit row is written
        """
        editor = seeded_roles["editor"]
        first = await user_role_service.assign(admin_user.id, plain_user.id, editor.id)

        second = await user_role_service.assign(admin_user.id, plain_user.id, editor.id)

        assert second.created is False
        assert second.assigned_at == first.assigned_at
        assert await grant_count(test_db, plain_user.id, editor.id) == 1
        assert len(await audit_rows(test_db, target_user_id=plain_user.id)) == 1

    @pytest.mark.asyncio
    async def test_lost_race_returns_existing_grant(
        self, user_role_service, test_db, admin_user, plain_user, seeded_roles
    ):
        """A writer that misses the concurrent grant hits the unique constraint"""
        editor = seeded_roles["editor"]
        winner = await user_role_service.assign(admin_user.id, plain_user.id, editor.id)
        existing = await user_role_service.user_role_repo.get(plain_user.id, editor.id)
        user_role_service.user_role_repo.get = AsyncMock(side_effect=[None, existing])

        result = await user_role_service.assign(admin_user.id, plain_user.id, editor.id)

        assert result.created is False
        assert result.assigned_at == winner.assigned_at
        assert await grant_count(test_db, plain_user.id, editor.id) == 1
        assert len(await audit_rows(test_db, target_user_id=plain_user.id)) == 1

    @pytest.mark.asyncio
    async def test_unknown_user(self, user_role_service, admin_user, seeded_roles):
        with pytest.raises(UserNotFoundError):
            await user_role_service.assign(admin_user.id, "ghost", seeded_roles["editor"].id)

    @pytest.mark.asyncio
    async def test_unknown_role(self, user_role_service, admin_user, plain_user):
        with pytest.raises(RoleNotFoundError):
            await user_role_service.assign(admin_user.id, plain_user.id, "no-such-role")

    @pytest.mark.asyncio
    async def test_deleted_role_cannot_be_assigned(
        self, user_role_service, test_db, admin_user, plain_user
    ):
        role = await create_role(test_db, "temp", ["places:read"])
        await RoleService(test_db).delete(role.id)

        with pytest.raises(RoleNotFoundError):
            await user_role_service.assign(admin_user.id, plain_user.id, role.id)

    @pytest.mark.asyncio
    async def test_actor_required(self, user_role_service, plain_user, seeded_roles):
        with pytest.raises(UnauthorizedError):
            await user_role_service.assign("", plain_user.id, seeded_roles["editor"].id)

    @pytest.mark.asyncio
    async def test_cache_is_invalidated_after_commit(
        self, test_db, admin_user, plain_user, seeded_roles
    ):
        authz = AsyncMock()
        service = UserRoleService(test_db, authorization_service=authz)

        await service.assign(admin_user.id, plain_user.id, seeded_roles["client"].id)
        await service.unassign(admin_user.id, plain_user.id, seeded_roles["client"].id)

        authz.invalidate_user_cache.assert_not_awaited()

        await run_commit_callbacks(test_db)

        assert authz.invalidate_user_cache.await_count == 2
        authz.invalidate_user_cache.assert_awaited_with(plain_user.id)

    @pytest.mark.asyncio
    async def test_revoked_grant_is_not_served_from_cache(
        self, test_db, admin_user, editor_user, seeded_roles
    ):
        """
        GIVEN a revoke that has not committed yet
        WHEN a permission read re-caches the user's summary in that window
        THEN the cached key is dropped once the transaction commits
        """
        cache = CacheService()
        cache.redis = AsyncMock()
        cache._connected = True
        cache.get = AsyncMock(return_value=None)
        cache.set = AsyncMock(return_value=True)
        cache.delete = AsyncMock(return_value=True)
        authz = AuthorizationService(test_db, cache_service=cache)
        service = UserRoleService(test_db, authorization_service=authz)

        await service.unassign(admin_user.id, editor_user.id, seeded_roles["editor"].id)
        await authz.has_permission(editor_user.id, "places:write")

        cache.set.assert_awaited_once()
        cache.delete.assert_not_awaited()

        await run_commit_callbacks(test_db)

        cache.delete.assert_awaited_once_with(f"permissions:{editor_user.id}")

    @pytest.mark.asyncio
    async def test_failed_audit_write_leaves_no_grant(
        self, user_role_service, test_db, admin_user, plain_user, seeded_roles
    ):
        editor = seeded_roles["editor"]
        user_role_service.audit_repo.append = AsyncMock(
            side_effect=RuntimeError("audit store down")
        )

        with pytest.raises(RuntimeError):
            await user_role_service.assign(admin_user.id, plain_user.id, editor.id)

        assert await grant_count(test_db, plain_user.id, editor.id) == 0
        assert await audit_rows(test_db) == []


class TestUnassign:
    @pytest.mark.asyncio
    async def test_unassign_removes_grant_and_audits(
        self, user_role_service, test_db, admin_user, editor_user, seeded_roles
    ):
        editor = seeded_roles["editor"]

        await user_role_service.unassign(admin_user.id, editor_user.id, editor.id)

        assert await grant_count(test_db, editor_user.id, editor.id) == 0
        rows = await audit_rows(test_db, target_user_id=editor_user.id)
        assert [row.action for row in rows] == ["remove"]

    @pytest.mark.asyncio
    async def test_unassign_missing_grant(
        self, user_role_service, test_db, admin_user, plain_user, seeded_roles
    ):
        with pytest.raises(AssignmentNotFoundError):
            await user_role_service.unassign(admin_user.id, plain_user.id, seeded_roles["editor"].id)

        assert await audit_rows(test_db) == []

    @pytest.mark.asyncio
    async def test_deleted_role_can_still_be_unassigned(
        self, user_role_service, test_db, admin_user, plain_user
    ):
        role = await create_role(test_db, "seasonal", ["places:read"])
        await user_role_service.assign(admin_user.id, plain_user.id, role.id)
        await RoleService(test_db).delete(role.id)

        await user_role_service.unassign(admin_user.id, plain_user.id, role.id)

        rows = await audit_rows(test_db, role_id=role.id)
        assert [row.action for row in rows] == ["assign", "remove"]
        assert rows[-1].role_slug == "seasonal"

    @pytest.mark.asyncio
    async def test_assign_remove_assign_produces_three_entries(
        self, user_role_service, test_db, admin_user, plain_user, seeded_roles
    ):
        owner = seeded_roles["owner"]

        await user_role_service.assign(admin_user.id, plain_user.id, owner.id)
        await user_role_service.unassign(admin_user.id, plain_user.id, owner.id)
        await user_role_service.assign(admin_user.id, plain_user.id, owner.id)

        rows = await audit_rows(test_db, target_user_id=plain_user.id)
        assert [row.action for row in rows] == ["assign", "remove", "assign"]
        assert await grant_count(test_db, plain_user.id, owner.id) == 1

    @pytest.mark.asyncio
    async def test_failed_audit_write_keeps_grant(
        self, user_role_service, test_db, admin_user, editor_user, seeded_roles
    ):
        editor = seeded_roles["editor"]
        user_role_service.audit_repo.append = AsyncMock(
            side_effect=RuntimeError("audit store down")
        )

        with pytest.raises(RuntimeError):
            await user_role_service.unassign(admin_user.id, editor_user.id, editor.id)

        assert await grant_count(test_db, editor_user.id, editor.id) == 1
        assert await audit_rows(test_db) == []


class TestListForUser:
    @pytest.mark.asyncio
    async def test_lists_live_roles(self, user_role_service, test_db, admin_user, editor_user):
        temp = await create_role(test_db, "temp", ["places:read"])
        await user_role_service.assign(admin_user.id, editor_user.id, temp.id)
        await RoleService(test_db).delete(temp.id)

        items = await user_role_service.list_for_user(editor_user.id)

        assert [item.slug for item in items] == ["editor"]
        assert items[0].is_system is False
        assert items[0].assigned_at is not None

    @pytest.mark.asyncio
    async def test_unknown_user(self, user_role_service):
        with pytest.raises(UserNotFoundError):
            await user_role_service.list_for_user("ghost")
