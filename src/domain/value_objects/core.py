"""
Core value objects for the authorization domain.

Value objects are immutable and validate themselves on construction.
"""

import re
from dataclasses import dataclass

from src.domain.exceptions import ValidationException

# Lowercase alphanumeric and hyphens; no leading or trailing hyphen
SLUG_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


@dataclass(frozen=True)
class RoleSlug:
    """Immutable business key of a role (e.g., 'editor', 'place-owner')"""

    value: str

    def __post_init__(self):
        if not self.value:
            raise ValidationException("slug is required", field="slug")
        if not SLUG_PATTERN.fullmatch(self.value):
            raise ValidationException(
                "slug must be lowercase alphanumeric with inner hyphens", field="slug"
            )

    def __str__(self) -> str:
        return self.value

