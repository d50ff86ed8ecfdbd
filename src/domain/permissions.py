"""
Fixed permission catalog.

The catalog is the single source of truth for valid permission keys. Every
write path that accepts keys from a caller validates against it before
touching storage. Keys have the form ``resource:action``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class PermissionDefinition:
    """One catalog entry"""

    key: str
    resource: str
    action: str
    description: str


PLACES_READ = "places:read"
PLACES_WRITE = "places:write"
PLACES_OWN = "places:own"  # write access limited to places the user owns
PLACES_DELETE = "places:delete"
PLACE_TYPES_READ = "place_types:read"
PLACE_TYPES_WRITE = "place_types:write"
PLANS_READ = "plans:read"
PLANS_WRITE = "plans:write"
PLANS_DELETE = "plans:delete"
USERS_READ = "users:read"
USERS_WRITE = "users:write"
ROLES_MANAGE = "roles:manage"


def _define(key: str, description: str) -> PermissionDefinition:
    resource, action = key.split(":", 1)
    return PermissionDefinition(key=key, resource=resource, action=action, description=description)


PERMISSIONS: tuple[PermissionDefinition, ...] = (
    _define(PLACES_READ, "View places"),
    _define(PLACES_WRITE, "Create / edit places"),
    _define(PLACES_OWN, "Edit only places you own"),
    _define(PLACES_DELETE, "Delete places"),
    _define(PLACE_TYPES_READ, "View place types"),
    _define(PLACE_TYPES_WRITE, "Create / edit place types"),
    _define(PLANS_READ, "View plans"),
    _define(PLANS_WRITE, "Create / edit plans"),
    _define(PLANS_DELETE, "Delete plans"),
    _define(USERS_READ, "View user profiles"),
    _define(USERS_WRITE, "Edit user profiles"),
    _define(ROLES_MANAGE, "Create, update, delete roles and assign roles to users"),
)

_KEYS: frozenset[str] = frozenset(p.key for p in PERMISSIONS)


def all_permissions() -> tuple[PermissionDefinition, ...]:
    """Full catalog in declaration order"""
    return PERMISSIONS


def all_keys() -> frozenset[str]:
    """Every valid permission key"""
    return _KEYS


def is_valid(key: str) -> bool:
    """True if key is in the catalog"""
    return key in _KEYS


def invalid_keys(keys: Iterable[str]) -> list[str]:
    """Keys not in the catalog, in input order"""
    return [key for key in keys if key not in _KEYS]
