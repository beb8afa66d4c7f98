from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SignalEvent(BaseModel):
    """A single client interaction with a coffee.

    `event` is kept as a free string: unknown kinds are accepted and only
    bump the row's version and timestamps.
    """
    event: str = Field(..., min_length=1, max_length=50)
    coffee_name: Optional[str] = Field(None, alias="coffeeName", max_length=200)
    timestamp: Optional[datetime] = None
    is_favorite: Optional[bool] = Field(None, alias="isFavorite")
    feedback: Optional[str] = Field(None, max_length=500)
    feedback_reason: Optional[str] = Field(None, alias="feedbackReason", max_length=500)

    class Config:
        populate_by_name = True


class SignalEventRequest(SignalEvent):
    """Request body for POST /user-signals/events"""
    user_id: str = Field(..., alias="userId", min_length=1)
    coffee_id: str = Field(..., alias="coffeeId", min_length=1)


class CoffeeSignalView(BaseModel):
    """Aggregated signals for one coffee as returned to API consumers"""
    id: Optional[str] = None
    name: Optional[str] = None
    scans: int = 0
    repeats: int = 0
    favorites: int = 0
    ignores: int = 0
    consumed: int = 0
    last_feedback: Optional[str] = Field(None, alias="lastFeedback")
    last_feedback_reason: Optional[str] = Field(None, alias="lastFeedbackReason")
    last_seen: Optional[datetime] = Field(None, alias="lastSeen")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    version: int = 0

    class Config:
        populate_by_name = True
