# Mixins for model composition
from src.infrastructure.persistence.models.mixins import (CuidMixin,
                                                          SoftDeleteMixin,
                                                          TimestampMixin)
from src.infrastructure.persistence.models.permission import (RolePermission,
                                                              UserRole)
from src.infrastructure.persistence.models.place import Place
from src.infrastructure.persistence.models.role import Role
from src.infrastructure.persistence.models.role_audit_log import RoleAuditLog
from src.infrastructure.persistence.models.user import User

__all__ = [
    # Models
    "User",
    "Place",
    "Role",
    "RolePermission",
    "UserRole",
    "RoleAuditLog",
    # Mixins
    "CuidMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
]
