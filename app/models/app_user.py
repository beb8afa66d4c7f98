from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.user_statistics import UserStatistics
    from app.models.user_signal import UserSignal
    from app.models.user_taste_profile import UserTasteProfile


class AppUser(Base):
    """Identity anchor keyed by the Firebase UID."""

    __tablename__ = "app_users"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    statistics: Mapped[Optional["UserStatistics"]] = relationship(
        "UserStatistics", back_populates="user", cascade="all, delete-orphan", uselist=False
    )
    signals: Mapped[list["UserSignal"]] = relationship(
        "UserSignal", back_populates="user", cascade="all, delete-orphan"
    )
    taste_profile: Mapped[Optional["UserTasteProfile"]] = relationship(
        "UserTasteProfile", back_populates="user", cascade="all, delete-orphan", uselist=False
    )
