from sqlalchemy import Boolean, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (CuidMixin,
                                                          SoftDeleteMixin,
                                                          TimestampMixin)

_LIVE = text("deleted_at IS NULL")


class Role(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """
    Named bundle of permissions (e.g., 'admin', 'editor', 'client').

    Inherits:
        - id: CUID primary key
        - created_at / updated_at: Timestamps
        - deleted_at: Tombstone; deleted roles keep their rows so audit
          history referencing them stays meaningful
    """

    __tablename__ = "role"

    slug: Mapped[str] = mapped_column(String(100), nullable=False)  # immutable business key
    name: Mapped[str] = mapped_column(String(255), nullable=False)  # Display name
    is_system: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )  # System roles cannot be deleted or lose permissions

    # slug and name are unique among live roles only
    __table_args__ = (
        Index(
            "uq_role_slug_live",
            "slug",
            unique=True,
            postgresql_where=_LIVE,
            sqlite_where=_LIVE,
        ),
        Index(
            "uq_role_name_live",
            "name",
            unique=True,
            postgresql_where=_LIVE,
            sqlite_where=_LIVE,
        ),
    )
