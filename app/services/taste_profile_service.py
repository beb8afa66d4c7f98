import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import FirebaseUser
from app.core.taste import normalize_taste
from app.db.repositories.taste_profile_repo import TasteProfileRepository
from app.models.app_user import AppUser
from app.models.user_taste_profile import UserTasteProfile
from app.schemas.profile import (
    CoffeePreferences,
    CoffeePreferencesInput,
    ProfileResponse,
    TasteProfileUpdate,
)
from app.services.user_provisioning import derive_display_name

logger = logging.getLogger(__name__)

TASTE_DIMENSIONS = ("sweetness", "acidity", "bitterness", "body")
DEFAULT_TASTE_VALUE = 5
DEFAULT_DISPLAY_NAME = "Coffee lover"
DEFAULT_CAFFEINE_SENSITIVITY = "medium"
DEFAULT_PREFERRED_STRENGTH = "balanced"
DEFAULT_PREFERENCE_CONFIDENCE = 0.35


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def to_coffee_preferences(profile: UserTasteProfile) -> CoffeePreferences:
    return CoffeePreferences(
        sweetness=float(profile.sweetness),
        acidity=float(profile.acidity),
        bitterness=float(profile.bitterness),
        body=float(profile.body),
        flavor_notes=profile.flavor_notes,
        milk_preferences=profile.milk_preferences,
        caffeine_sensitivity=profile.caffeine_sensitivity,
        preferred_strength=profile.preferred_strength,
        quiz_version=profile.quiz_version,
        quiz_answers=profile.quiz_answers or {},
        consistency_score=profile.consistency_score,
    )


class TasteProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.profile_repo = TasteProfileRepository(db)

    async def get_profile(self, user: AppUser, identity: FirebaseUser) -> ProfileResponse:
        """
        Build the profile view: identity plus stored taste preferences.

        Email and name come from the current token, so a display name changed
        in Firebase shows up without touching app_users.
        """
        taste = await self.profile_repo.get_by_user_id(user.id)

        return ProfileResponse(
            id=user.id,
            email=identity.email,
            name=derive_display_name(identity.email, identity.name) or DEFAULT_DISPLAY_NAME,
            ai_recommendation=taste.ai_recommendation if taste else None,
            manual_input=taste.manual_input if taste else None,
            taste_vector=taste.taste_vector if taste else None,
            coffee_preferences=to_coffee_preferences(taste) if taste else None,
        )

    @staticmethod
    def normalize_dimensions(payload: TasteProfileUpdate) -> Dict[str, float]:
        """
        Resolve sweetness/acidity/bitterness/body to the 0-10 scale.

        Explicit values win. When none is sent, the quiz taste_vector (0-1)
        is scaled by 10. Stored preferences, then 5, act as fallback.

        Raises:
            TasteValidationError: a dimension has no usable value.
        """
        prefs = payload.coffee_preferences or CoffeePreferencesInput()

        has_explicit_inputs = any(
            getattr(payload, dimension) is not None for dimension in TASTE_DIMENSIONS
        )
        scaled_vector: Dict[str, Optional[float]] = {}
        if not has_explicit_inputs and payload.taste_vector is not None:
            for dimension in TASTE_DIMENSIONS:
                component = getattr(payload.taste_vector, dimension)
                scaled_vector[dimension] = component * 10 if component is not None else None

        return {
            dimension: normalize_taste(
                _first_present(getattr(payload, dimension), scaled_vector.get(dimension)),
                _first_present(getattr(prefs, dimension), DEFAULT_TASTE_VALUE),
                dimension,
            )
            for dimension in TASTE_DIMENSIONS
        }

    async def update_profile(self, user_id: str, payload: TasteProfileUpdate) -> UserTasteProfile:
        """Normalize the submitted tastes and create or overwrite the profile."""
        prefs = payload.coffee_preferences or CoffeePreferencesInput()
        dimensions = self.normalize_dimensions(payload)

        fields = {
            **dimensions,
            "flavor_notes": _first_present(payload.flavor_notes, prefs.flavor_notes, {}),
            "milk_preferences": _first_present(payload.milk_preferences, prefs.milk_preferences, {}),
            "caffeine_sensitivity": _first_present(
                payload.caffeine_sensitivity, prefs.caffeine_sensitivity, DEFAULT_CAFFEINE_SENSITIVITY
            ),
            "preferred_strength": _first_present(
                payload.preferred_strength, prefs.preferred_strength, DEFAULT_PREFERRED_STRENGTH
            ),
            "preference_confidence": _first_present(
                payload.preference_confidence, DEFAULT_PREFERENCE_CONFIDENCE
            ),
            "quiz_version": prefs.quiz_version,
            "quiz_answers": prefs.quiz_answers,
            "taste_vector": payload.taste_vector.model_dump() if payload.taste_vector else None,
            "consistency_score": prefs.consistency_score,
            "ai_recommendation": payload.ai_recommendation,
            "manual_input": payload.manual_input,
            "last_recalculated_at": datetime.now(timezone.utc),
        }

        existing = await self.profile_repo.get_by_user_id(user_id)
        if existing:
            profile = await self.profile_repo.update(existing, **fields)
        else:
            profile = await self.profile_repo.create(user_id, **fields)

        logger.info(f"Taste profile updated for {user_id}")
        return profile
