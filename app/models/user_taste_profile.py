from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import Float, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.db.base import Base

if TYPE_CHECKING:
    from app.models.app_user import AppUser


class UserTasteProfile(Base):
    """Normalized taste preferences from the onboarding quiz and manual edits."""

    __tablename__ = "user_taste_profiles"

    user_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("app_users.id", ondelete="CASCADE"), primary_key=True
    )
    sweetness: Mapped[float] = mapped_column(Float, nullable=False)
    acidity: Mapped[float] = mapped_column(Float, nullable=False)
    bitterness: Mapped[float] = mapped_column(Float, nullable=False)
    body: Mapped[float] = mapped_column(Float, nullable=False)
    flavor_notes: Mapped[Any] = mapped_column(JSON, nullable=True)
    milk_preferences: Mapped[Any] = mapped_column(JSON, nullable=True)
    caffeine_sensitivity: Mapped[str] = mapped_column(String, default="medium")
    preferred_strength: Mapped[str] = mapped_column(String, default="balanced")
    preference_confidence: Mapped[float] = mapped_column(Float, default=0.35)
    quiz_version: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    quiz_answers: Mapped[Any] = mapped_column(JSON, nullable=True)
    taste_vector: Mapped[Any] = mapped_column(JSON, nullable=True)
    consistency_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ai_recommendation: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    manual_input: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_recalculated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationship
    user: Mapped["AppUser"] = relationship("AppUser", back_populates="taste_profile")
