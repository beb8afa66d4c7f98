"""
Provisioning of the shadow rows every authenticated user needs.

app_users and user_statistics are referenced by foreign keys from the
signal and taste tables, so both must exist before the first dependent write.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories.app_user_repo import AppUserRepository, UserStatisticsRepository
from app.db.session import async_session_maker

logger = logging.getLogger(__name__)


def derive_display_name(email: Optional[str], name: Optional[str] = None) -> Optional[str]:
    """Explicit name, else the local part of the email, else None."""
    if name:
        return name
    if email:
        return email.split("@")[0]
    return None


async def _provision(db: AsyncSession, user_id: str, email: Optional[str], name: Optional[str]) -> None:
    users = AppUserRepository(db)
    statistics = UserStatisticsRepository(db)

    if users.supports_upsert():
        if await users.create_if_absent(user_id, email=email, name=name):
            logger.info(f"Provisioned app user {user_id}")
        if await statistics.create_if_absent(user_id):
            logger.info(f"Provisioned statistics row for {user_id}")
        return

    # Check-then-insert: a concurrent request can win the race between the
    # SELECT and the INSERT; the resulting IntegrityError is left to the caller.
    if not await users.exists(user_id):
        await users.create(user_id, email=email, name=name)
        logger.info(f"Provisioned app user {user_id}")
    if not await statistics.exists(user_id):
        await statistics.create(user_id)
        logger.info(f"Provisioned statistics row for {user_id}")


async def ensure_user_provisioned(
    user_id: str,
    email: Optional[str] = None,
    *,
    name: Optional[str] = None,
    executor: Optional[AsyncSession] = None,
) -> None:
    """
    Make sure the app_users and user_statistics rows exist for `user_id`.

    Args:
        user_id: Firebase UID
        email: Stored on first creation only
        name: Display name; defaults to the email local part
        executor: Session to run in. The caller owns its transaction. When
            omitted a fresh session is opened and committed here.

    Store errors (including IntegrityError on a lost race) propagate unchanged.
    """
    if not user_id:
        raise ValueError("user_id must not be empty")

    display_name = derive_display_name(email, name)

    if executor is not None:
        await _provision(executor, user_id, email, display_name)
        return

    async with async_session_maker() as session:
        try:
            await _provision(session, user_id, email, display_name)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
