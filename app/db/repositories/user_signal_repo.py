from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.upsert import insert_ignore, supports_insert_ignore
from app.models.user_signal import UserSignal


class UserSignalRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: str, coffee_id: str) -> Optional[UserSignal]:
        """Get the signal row for one coffee, bypassing stale identity-map state."""
        result = await self.db.execute(
            select(UserSignal)
            .where(UserSignal.user_id == user_id, UserSignal.coffee_id == coffee_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> List[UserSignal]:
        """All signal rows for a user, most recently updated first."""
        result = await self.db.execute(
            select(UserSignal)
            .where(UserSignal.user_id == user_id)
            .order_by(UserSignal.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def insert(self, user_id: str, row: dict) -> bool:
        """
        Insert the first row for a coffee.

        Returns False when another request created the row first.
        """
        values = {"user_id": user_id, **row}
        if supports_insert_ignore(self.db):
            return await insert_ignore(self.db, UserSignal, values)

        try:
            async with self.db.begin_nested():
                self.db.add(UserSignal(**values))
        except IntegrityError:
            return False
        return True

    async def update_if_version(
        self,
        user_id: str,
        row: dict,
        expected_version: int,
    ) -> bool:
        """
        Write `row` only if the stored version is still `expected_version`.

        Returns False when the row changed since it was read.
        """
        values = {key: value for key, value in row.items() if key != "coffee_id"}
        result = await self.db.execute(
            update(UserSignal)
            .where(
                UserSignal.user_id == user_id,
                UserSignal.coffee_id == row["coffee_id"],
                UserSignal.version == expected_version,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
