import logging
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import async_session_maker
from app.core.security import get_current_user, FirebaseUser
from app.db.repositories.app_user_repo import AppUserRepository
from app.models.app_user import AppUser
from app.services.user_provisioning import ensure_user_provisioned

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_current_db_user(
    firebase_user: FirebaseUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AppUser:
    """
    Provision and return the database user for the Firebase identity.

    Every authenticated request passes through here, so the app_users and
    user_statistics rows exist before any endpoint writes dependent rows.
    """
    try:
        await ensure_user_provisioned(
            firebase_user.uid,
            firebase_user.email,
            name=firebase_user.name,
            executor=db,
        )
    except IntegrityError:
        # A concurrent request provisioned the same user between our
        # SELECT and INSERT. The rows exist now; re-check and continue.
        logger.info(f"User {firebase_user.uid} already provisioned by a concurrent request")
        await db.rollback()
        await ensure_user_provisioned(
            firebase_user.uid,
            firebase_user.email,
            name=firebase_user.name,
            executor=db,
        )

    await db.commit()
    return await AppUserRepository(db).get_by_id(firebase_user.uid)
