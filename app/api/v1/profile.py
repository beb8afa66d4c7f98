from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_db_user
from app.core.security import get_current_user, FirebaseUser
from app.models.app_user import AppUser
from app.schemas.common import ErrorResponse
from app.schemas.profile import ProfileResponse, ProfileUpdateResponse, TasteProfileUpdate
from app.services.taste_profile_service import TasteProfileService, to_coffee_preferences

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    current_user: AppUser = Depends(get_current_db_user),
    firebase_user: FirebaseUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the authenticated user's profile with coffee preferences.

    coffee_preferences is null until the taste quiz has been saved.
    """
    return await TasteProfileService(db).get_profile(current_user, firebase_user)


@router.put(
    "",
    response_model=ProfileUpdateResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid taste value"}},
)
async def update_profile(
    profile_data: TasteProfileUpdate,
    current_user: AppUser = Depends(get_current_db_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Save the user's taste preferences.

    Taste values may be numbers, numeric strings or words such as "little",
    "medium" or "very_high"; they are stored on a 0-10 scale.

    Returns:
    - 200: Profile updated
    - 400: A taste value could not be interpreted (details.field names it)
    - 401: Invalid or missing authentication token
    """
    service = TasteProfileService(db)
    profile = await service.update_profile(current_user.id, profile_data)

    await db.commit()
    return ProfileUpdateResponse(coffee_preferences=to_coffee_preferences(profile))
