"""Unit tests for AuthorizationGuard"""

from unittest.mock import AsyncMock

import pytest

from src.application.services.authorization_guard import AuthorizationGuard
from src.domain.exceptions import (AuthorizationCheckError, InternalError,
                                   PermissionDeniedError, UnauthorizedError)

FULL = "places:write"
OWN = "places:own"


def evaluator_granting(*granted: str) -> AsyncMock:
    """Evaluator double answering from a fixed permission set"""
    evaluator = AsyncMock()

    async def has_permission(user_id: str, permission: str) -> bool:
        return permission in granted

    evaluator.has_permission = AsyncMock(side_effect=has_permission)
    return evaluator


@pytest.fixture
def mock_resolver():
    """Mock ownership resolver"""
    resolver = AsyncMock()
    resolver.is_owner = AsyncMock(return_value=True)
    return resolver


class TestRequirePermission:
    """Tests for require_permission"""

    @pytest.mark.asyncio
    async def test_allows_when_granted(self):
        evaluator = evaluator_granting("roles:manage")
        guard = AuthorizationGuard(evaluator)

        await guard.require_permission("user-1", "roles:manage")

        evaluator.has_permission.assert_awaited_once_with(
            user_id="user-1", permission="roles:manage"
        )

    @pytest.mark.asyncio
    async def test_denies_when_missing(self):
        guard = AuthorizationGuard(evaluator_granting())

        with pytest.raises(PermissionDeniedError) as exc_info:
            await guard.require_permission("user-1", "roles:manage")

        assert exc_info.value.details["permission"] == "roles:manage"

    @pytest.mark.asyncio
    async def test_missing_user_is_unauthorized(self):
        evaluator = evaluator_granting("roles:manage")
        guard = AuthorizationGuard(evaluator)

        with pytest.raises(UnauthorizedError):
            await guard.require_permission("", "roles:manage")

        evaluator.has_permission.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_evaluator_failure_is_not_a_denial(self):
        evaluator = AsyncMock()
        evaluator.has_permission = AsyncMock(side_effect=RuntimeError("db down"))
        guard = AuthorizationGuard(evaluator)

        with pytest.raises(AuthorizationCheckError) as exc_info:
            await guard.require_permission("user-1", "roles:manage")

        assert isinstance(exc_info.value, InternalError)
        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, PermissionDeniedError)


class TestRequireOwnershipOrPermission:
    """Tests for require_ownership_or_permission"""

    @pytest.mark.asyncio
    async def test_full_permission_short_circuits(self, mock_resolver):
        """
        GIVEN a user holding the full permission
        WHEN the ownership-or-permission rule is checked
        THEN access is allowed with one evaluator call and no ownership lookup
        """
        evaluator = evaluator_granting(FULL)
        guard = AuthorizationGuard(evaluator, mock_resolver)

        await guard.require_ownership_or_permission("user-1", "place-1", FULL, OWN)

        assert evaluator.has_permission.await_count == 1
        mock_resolver.is_owner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owner_with_own_permission_is_allowed(self, mock_resolver):
        evaluator = evaluator_granting(OWN)
        guard = AuthorizationGuard(evaluator, mock_resolver)

        await guard.require_ownership_or_permission("user-1", "place-1", FULL, OWN)

        assert evaluator.has_permission.await_count == 2
        mock_resolver.is_owner.assert_awaited_once_with("place-1", "user-1")

    @pytest.mark.asyncio
    async def test_non_owner_is_denied(self, mock_resolver):
        mock_resolver.is_owner.return_value = False
        guard = AuthorizationGuard(evaluator_granting(OWN), mock_resolver)

        with pytest.raises(PermissionDeniedError) as exc_info:
            await guard.require_ownership_or_permission("user-1", "place-1", FULL, OWN)

        assert exc_info.value.details["resource_id"] == "place-1"

    @pytest.mark.asyncio
    async def test_lacking_own_permission_skips_ownership(self, mock_resolver):
        """
        GIVEN a user with neither permission
        WHEN the rule is checked
        THEN access is denied without resolving ownership, even for an owner
        """
        guard = AuthorizationGuard(evaluator_granting(), mock_resolver)

        with pytest.raises(PermissionDeniedError) as exc_info:
            await guard.require_ownership_or_permission("user-1", "place-1", FULL, OWN)

        assert exc_info.value.details["permission"] == OWN
        mock_resolver.is_owner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_resolver_failure_is_check_error(self, mock_resolver):
        mock_resolver.is_owner.side_effect = RuntimeError("timeout")
        guard = AuthorizationGuard(evaluator_granting(OWN), mock_resolver)

        with pytest.raises(AuthorizationCheckError) as exc_info:
            await guard.require_ownership_or_permission("user-1", "place-1", FULL, OWN)

        assert exc_info.value.details == {"check": "ownership"}

    @pytest.mark.asyncio
    async def test_evaluator_failure_on_full_permission_is_check_error(self, mock_resolver):
        evaluator = AsyncMock()
        evaluator.has_permission = AsyncMock(side_effect=RuntimeError("db down"))
        guard = AuthorizationGuard(evaluator, mock_resolver)

        with pytest.raises(AuthorizationCheckError) as exc_info:
            await guard.require_ownership_or_permission("user-1", "place-1", FULL, OWN)

        assert exc_info.value.details == {"check": "permission"}
        mock_resolver.is_owner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_user_is_unauthorized(self, mock_resolver):
        guard = AuthorizationGuard(evaluator_granting(FULL), mock_resolver)

        with pytest.raises(UnauthorizedError):
            await guard.require_ownership_or_permission(None, "place-1", FULL, OWN)
