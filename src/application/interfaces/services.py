"""
Service interfaces (ports) for the application layer.

The authorization guard depends only on these one-method protocols, so
tests can substitute plain async doubles.
"""

from __future__ import annotations

from typing import Protocol


class IPermissionEvaluator(Protocol):
    """Answers global permission questions"""

    async def has_permission(self, user_id: str, permission: str) -> bool:
        """True if any of the user's live roles grants the permission"""
        ...


class IOwnershipResolver(Protocol):
    """Answers ownership questions for one resource type"""

    async def is_owner(self, resource_id: str, user_id: str) -> bool:
        """True iff the resource exists and is owned by the user"""
        ...
