"""Tests for the fixed permission catalog"""

from src.domain import permissions as catalog


def test_catalog_contains_every_declared_key():
    assert catalog.all_keys() == {
        "places:read",
        "places:write",
        "places:own",
        "places:delete",
        "place_types:read",
        "place_types:write",
        "plans:read",
        "plans:write",
        "plans:delete",
        "users:read",
        "users:write",
        "roles:manage",
    }


def test_all_permissions_keeps_declaration_order():
    keys = [p.key for p in catalog.all_permissions()]

    assert keys[0] == catalog.PLACES_READ
    assert keys[-1] == catalog.ROLES_MANAGE
    assert len(keys) == len(set(keys))


def test_definitions_split_resource_and_action():
    definition = next(p for p in catalog.all_permissions() if p.key == "place_types:write")

    assert definition.resource == "place_types"
    assert definition.action == "write"
    assert definition.description


def test_is_valid():
    assert catalog.is_valid("plans:delete") is True
    assert catalog.is_valid("plans:archive") is False
    assert catalog.is_valid("") is False
    assert catalog.is_valid("*:*") is False


def test_invalid_keys_reports_offenders_in_input_order():
    result = catalog.invalid_keys(["places:read", "bogus:x", "plans:write", "nope"])

    assert result == ["bogus:x", "nope"]
