from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (CuidMixin,
                                                          SoftDeleteMixin,
                                                          TimestampMixin)


class User(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """
    Application user. Owned by the identity collaborator; the authorization
    core only reads it.
    """

    __tablename__ = "user"

    username: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (UniqueConstraint("email", name="uq_user_email"),)
