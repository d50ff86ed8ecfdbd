"""
Shared enumerations for the Bastion authorization core.
"""

from enum import Enum


class RoleAuditAction(str, Enum):
    """Role assignment audit action"""

    ASSIGN = "assign"
    REMOVE = "remove"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [action.value for action in cls]
