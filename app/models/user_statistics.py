from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.app_user import AppUser


class UserStatistics(Base):
    """One-to-one shadow of AppUser. Counters are owned by the dashboard."""

    __tablename__ = "user_statistics"

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("app_users.id", ondelete="CASCADE"), primary_key=True
    )
    brew_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    recipe_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    scan_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    coffee_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationship
    user: Mapped["AppUser"] = relationship("AppUser", back_populates="statistics")
