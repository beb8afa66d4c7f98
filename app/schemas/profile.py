from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

# Raw taste input as sent by the onboarding forms: 7, "7", "medium_high", ...
# Passed to normalize_taste as received; JSON true must stay a bool.
TasteInput = Optional[Any]


class TasteVector(BaseModel):
    """Quiz output on a 0-1 scale"""
    sweetness: Optional[float] = None
    acidity: Optional[float] = None
    bitterness: Optional[float] = None
    body: Optional[float] = None

    class Config:
        extra = "allow"


class CoffeePreferencesInput(BaseModel):
    """Previously stored or quiz-derived preferences, used as fallbacks"""
    sweetness: TasteInput = None
    acidity: TasteInput = None
    bitterness: TasteInput = None
    body: TasteInput = None
    flavor_notes: Optional[Any] = None
    milk_preferences: Optional[Any] = None
    caffeine_sensitivity: Optional[str] = None
    preferred_strength: Optional[str] = None
    quiz_version: Optional[str] = None
    quiz_answers: Optional[Dict[str, Any]] = None
    consistency_score: Optional[float] = None


class TasteProfileUpdate(BaseModel):
    """Schema for PUT /profile"""
    coffee_preferences: Optional[CoffeePreferencesInput] = None
    sweetness: TasteInput = None
    acidity: TasteInput = None
    bitterness: TasteInput = None
    body: TasteInput = None
    taste_vector: Optional[TasteVector] = None
    ai_recommendation: Optional[str] = None
    manual_input: Optional[str] = None
    flavor_notes: Optional[Any] = None
    milk_preferences: Optional[Any] = None
    caffeine_sensitivity: Optional[str] = Field(None, max_length=50)
    preferred_strength: Optional[str] = Field(None, max_length=50)
    preference_confidence: Optional[float] = Field(None, ge=0, le=1)


class CoffeePreferences(BaseModel):
    sweetness: float
    acidity: float
    bitterness: float
    body: float
    flavor_notes: Optional[Any] = None
    milk_preferences: Optional[Any] = None
    caffeine_sensitivity: Optional[str] = None
    preferred_strength: Optional[str] = None
    quiz_version: Optional[str] = None
    quiz_answers: Dict[str, Any] = Field(default_factory=dict)
    consistency_score: Optional[float] = None


class ProfileResponse(BaseModel):
    """Schema for GET /profile"""
    id: str
    email: Optional[str] = None
    name: str
    ai_recommendation: Optional[str] = None
    manual_input: Optional[str] = None
    taste_vector: Optional[Dict[str, Any]] = None
    coffee_preferences: Optional[CoffeePreferences] = None


class ProfileUpdateResponse(BaseModel):
    message: str = "Profile updated"
    coffee_preferences: CoffeePreferences
