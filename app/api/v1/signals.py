from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_db_user
from app.config import get_settings
from app.core.exceptions import PermissionDeniedError
from app.models.app_user import AppUser
from app.schemas.signal import CoffeeSignalView, SignalEventRequest
from app.services.signal_service import SignalService

router = APIRouter()


def _ensure_same_user(current_user: AppUser, user_id: str) -> None:
    if current_user.id != user_id:
        raise PermissionDeniedError("Signals belong to a different user")


@router.get("/{user_id}", response_model=List[CoffeeSignalView])
async def list_user_signals(
    user_id: str,
    current_user: AppUser = Depends(get_current_db_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the aggregated coffee signals of the authenticated user.

    Returns:
    - 200: Signals ordered by most recent update
    - 401: Invalid or missing authentication token
    - 403: user_id is not the authenticated user
    """
    _ensure_same_user(current_user, user_id)
    return await SignalService(db).list_signals(user_id)


@router.post("/events", response_model=CoffeeSignalView)
async def record_signal_event(
    payload: SignalEventRequest,
    current_user: AppUser = Depends(get_current_db_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a coffee interaction (scan, ignore, favorite, consumption, feedback)
    and return the updated aggregate.

    Returns:
    - 200: Updated signal aggregate
    - 401: Invalid or missing authentication token
    - 403: userId is not the authenticated user
    - 409: The aggregate changed concurrently too many times
    """
    _ensure_same_user(current_user, payload.user_id)

    service = SignalService(db, max_attempts=get_settings().SIGNAL_WRITE_MAX_ATTEMPTS)
    view = await service.record_event(current_user.id, payload.coffee_id, payload)

    await db.commit()
    return view
