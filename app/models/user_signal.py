from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional

from sqlalchemy import Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.app_user import AppUser

UNKNOWN_COFFEE_NAME = "Unknown coffee"

# Columns exposed by the signal read/write paths, in storage order.
SIGNAL_COLUMNS = (
    "coffee_id",
    "coffee_name",
    "scans",
    "repeats",
    "favorites",
    "ignores",
    "consumed",
    "last_feedback",
    "last_feedback_reason",
    "last_seen",
    "updated_at",
    "version",
)


class UserSignal(Base):
    """Aggregated behavioral counters for one (user, coffee) pair."""

    __tablename__ = "user_signals"

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("app_users.id", ondelete="CASCADE"), primary_key=True
    )
    coffee_id: Mapped[str] = mapped_column(String, primary_key=True)
    coffee_name: Mapped[str] = mapped_column(
        String, nullable=False, default=UNKNOWN_COFFEE_NAME
    )
    scans: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    repeats: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favorites: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ignores: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    consumed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_feedback: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_feedback_reason: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_seen: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationship
    user: Mapped["AppUser"] = relationship("AppUser", back_populates="signals")

    def as_row(self) -> Dict[str, Any]:
        """Return the storage-shaped row (snake-cased columns)."""
        return {column: getattr(self, column) for column in SIGNAL_COLUMNS}
