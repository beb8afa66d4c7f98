"""
Pure aggregation of coffee interaction events into per-coffee counters.

apply_event() never touches the database. Callers read the current row,
compute the next state here and write it back guarded by `version`
(see SignalService), so concurrent events for the same coffee are never
silently merged.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from app.models.enums import SignalEventKind
from app.models.user_signal import UNKNOWN_COFFEE_NAME
from app.schemas.signal import SignalEvent


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SignalState:
    """Storage-shaped aggregate for one coffee."""

    coffee_id: str
    coffee_name: Optional[str] = None
    scans: int = 0
    repeats: int = 0
    favorites: int = 0
    ignores: int = 0
    consumed: int = 0
    last_feedback: Optional[str] = None
    last_feedback_reason: Optional[str] = None
    last_seen: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SignalState":
        return cls(
            coffee_id=row["coffee_id"],
            coffee_name=row.get("coffee_name"),
            scans=row.get("scans") or 0,
            repeats=row.get("repeats") or 0,
            favorites=row.get("favorites") or 0,
            ignores=row.get("ignores") or 0,
            consumed=row.get("consumed") or 0,
            last_feedback=row.get("last_feedback"),
            last_feedback_reason=row.get("last_feedback_reason"),
            last_seen=row.get("last_seen"),
            updated_at=row.get("updated_at"),
            version=row.get("version") or 0,
        )

    def as_row(self) -> dict:
        return {
            "coffee_id": self.coffee_id,
            "coffee_name": self.coffee_name,
            "scans": self.scans,
            "repeats": self.repeats,
            "favorites": self.favorites,
            "ignores": self.ignores,
            "consumed": self.consumed,
            "last_feedback": self.last_feedback,
            "last_feedback_reason": self.last_feedback_reason,
            "last_seen": self.last_seen,
            "updated_at": self.updated_at,
            "version": self.version,
        }


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _effective_timestamp(
    current: SignalState,
    event: SignalEvent,
    now: Callable[[], datetime],
) -> datetime:
    timestamp = _as_aware(event.timestamp or now())
    if current.updated_at is not None:
        # updated_at never moves backwards, even for late-delivered events
        timestamp = max(timestamp, _as_aware(current.updated_at))
    return timestamp


def apply_event(
    current: SignalState,
    event: SignalEvent,
    *,
    now: Callable[[], datetime] = utcnow,
) -> SignalState:
    """
    Compute the next aggregate state for `event`.

    Every event sets the coffee name (event name, else current, else the
    placeholder), stamps last_seen/updated_at and bumps version by one.
    Counters only ever increase; unknown event kinds change nothing else.
    """
    timestamp = _effective_timestamp(current, event, now)
    changes = {
        "coffee_name": event.coffee_name or current.coffee_name or UNKNOWN_COFFEE_NAME,
        "last_seen": timestamp,
        "updated_at": timestamp,
        "version": current.version + 1,
    }

    kind = event.event
    if kind == SignalEventKind.SCAN:
        changes["scans"] = current.scans + 1
        if current.scans > 0:
            changes["repeats"] = current.repeats + 1
    elif kind == SignalEventKind.IGNORE:
        changes["ignores"] = current.ignores + 1
    elif kind == SignalEventKind.FAVORITE:
        if event.is_favorite:
            changes["favorites"] = current.favorites + 1
    elif kind == SignalEventKind.CONSUMPTION:
        changes["consumed"] = current.consumed + 1
    elif kind == SignalEventKind.FEEDBACK:
        changes["last_feedback"] = event.feedback or None
        changes["last_feedback_reason"] = event.feedback_reason or None

    return replace(current, **changes)
