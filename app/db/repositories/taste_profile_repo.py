from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user_taste_profile import UserTasteProfile


class TasteProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user_id(self, user_id: str) -> Optional[UserTasteProfile]:
        """Get taste profile by user_id (firebase_uid)."""
        result = await self.db.execute(
            select(UserTasteProfile).where(UserTasteProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, **fields: Any) -> UserTasteProfile:
        """Create a new taste profile."""
        profile = UserTasteProfile(user_id=user_id, **fields)
        self.db.add(profile)
        await self.db.flush()
        await self.db.refresh(profile)
        return profile

    async def update(self, profile: UserTasteProfile, **fields: Any) -> UserTasteProfile:
        """Overwrite the given fields on an existing profile."""
        for key, value in fields.items():
            setattr(profile, key, value)

        await self.db.flush()
        await self.db.refresh(profile)
        return profile
