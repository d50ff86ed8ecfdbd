from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import CuidMixin
from src.shared.utils.datetime import utc_now


class RoleAuditLog(CuidMixin, Base):
    """
    Append-only record of each role assignment change.

    role_id deliberately has no foreign key and role_slug is copied at
    write time, so entries survive role renames and deletions.
    Rows are never updated or deleted.
    """

    __tablename__ = "role_audit_log"

    actor_id: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)  # assign | remove
    target_user_id: Mapped[str] = mapped_column(String, nullable=False)
    role_id: Mapped[str] = mapped_column(String, nullable=False)
    role_slug: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_role_audit_log_target_user", "target_user_id", "created_at"),
        Index("ix_role_audit_log_role", "role_id", "created_at"),
        Index("ix_role_audit_log_action", "action"),
        Index("ix_role_audit_log_created_at", "created_at"),
    )
