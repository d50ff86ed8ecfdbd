from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import CuidMixin


class RolePermission(CuidMixin, Base):
    """
    Many-to-many: roles ←→ catalog permission keys.

    Rows for a role are replaced wholesale when its permission set changes.
    """

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String, ForeignKey("role.id", ondelete="CASCADE"), nullable=False
    )
    permission: Mapped[str] = mapped_column(String(100), nullable=False)  # e.g., 'places:read'
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("role_id", "permission", name="uq_role_permission"),
        Index("ix_role_permission_permission", "permission"),
    )


class UserRole(CuidMixin, Base):
    """
    Many-to-many: users ←→ roles. One row per active grant.

    Hard-deleted on unassignment; history lives in role_audit_log.
    """

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    # Roles are only soft-deleted, so this reference never dangles
    role_id: Mapped[str] = mapped_column(String, ForeignKey("role.id"), nullable=False)

    # Role assignment metadata
    assigned_by: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", name="uq_user_role"),
        Index("ix_user_role_role", "role_id"),
    )
