from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.upsert import insert_ignore, supports_insert_ignore
from app.models.app_user import AppUser
from app.models.user_statistics import UserStatistics


class AppUserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: str) -> Optional[AppUser]:
        """Get user by ID (Firebase UID)."""
        result = await self.db.execute(select(AppUser).where(AppUser.id == user_id))
        return result.scalar_one_or_none()

    async def exists(self, user_id: str) -> bool:
        result = await self.db.execute(
            select(AppUser.id).where(AppUser.id == user_id).limit(1)
        )
        return result.first() is not None

    async def create(
        self,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> None:
        """Create a new user. Raises IntegrityError if it already exists."""
        self.db.add(AppUser(id=user_id, email=email, name=name))
        await self.db.flush()

    async def create_if_absent(
        self,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> bool:
        """Insert the user unless present. Returns True if a row was created."""
        return await insert_ignore(
            self.db, AppUser, {"id": user_id, "email": email, "name": name}
        )

    def supports_upsert(self) -> bool:
        return supports_insert_ignore(self.db)


class UserStatisticsRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, user_id: str) -> bool:
        result = await self.db.execute(
            select(UserStatistics.user_id).where(UserStatistics.user_id == user_id).limit(1)
        )
        return result.first() is not None

    async def create(self, user_id: str) -> None:
        """Create a statistics row with default counters."""
        self.db.add(UserStatistics(user_id=user_id))
        await self.db.flush()

    async def create_if_absent(self, user_id: str) -> bool:
        return await insert_ignore(self.db, UserStatistics, {"user_id": user_id})
