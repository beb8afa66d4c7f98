import logging
from datetime import datetime
from typing import Callable, List

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import SignalConflictError
from app.db.repositories.user_signal_repo import UserSignalRepository
from app.schemas.signal import CoffeeSignalView, SignalEvent
from app.services.signal_aggregator import SignalState, apply_event, utcnow
from app.services.signal_mapper import to_view

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class SignalService:
    """
    Reads and records per-coffee user signals.

    Each event is a read-modify-write around apply_event(). The write only
    succeeds if the row's version is unchanged since the read; otherwise the
    attempt is repeated from a fresh read.
    """

    def __init__(
        self,
        db: AsyncSession,
        now: Callable[[], datetime] = utcnow,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.db = db
        self.now = now
        self.max_attempts = max(1, max_attempts)
        self.signal_repo = UserSignalRepository(db)

    async def list_signals(self, user_id: str) -> List[CoffeeSignalView]:
        """All aggregated signals for a user, most recent first."""
        rows = await self.signal_repo.list_for_user(user_id)
        return [to_view(row.as_row()) for row in rows]

    async def record_event(
        self,
        user_id: str,
        coffee_id: str,
        event: SignalEvent,
    ) -> CoffeeSignalView:
        """
        Apply one event to the (user, coffee) aggregate and persist it.

        Raises:
            SignalConflictError: the row kept changing for max_attempts tries.
        """
        for attempt in range(1, self.max_attempts + 1):
            existing = await self.signal_repo.get(user_id, coffee_id)
            current = (
                SignalState.from_row(existing.as_row())
                if existing is not None
                else SignalState(coffee_id=coffee_id)
            )
            updated = apply_event(current, event, now=self.now)
            row = updated.as_row()

            if existing is None:
                written = await self.signal_repo.insert(user_id, row)
            else:
                written = await self.signal_repo.update_if_version(
                    user_id, row, expected_version=current.version
                )

            if written:
                logger.debug(
                    f"Signal '{event.event}' for {user_id}/{coffee_id} stored at version {updated.version}"
                )
                return to_view(row)

            logger.info(
                f"Concurrent update on signal {user_id}/{coffee_id} "
                f"(attempt {attempt}/{self.max_attempts}), retrying"
            )

        raise SignalConflictError(
            "Signal was modified concurrently, please retry",
            details={"coffee_id": coffee_id, "attempts": self.max_attempts},
        )
