"""Domain value objects."""

from src.domain.value_objects.core import RoleSlug

__all__ = [
    "RoleSlug",
]
