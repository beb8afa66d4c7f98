import math
from typing import Any, Mapping, Optional

from app.schemas.signal import CoffeeSignalView

COUNTER_COLUMNS = ("scans", "repeats", "favorites", "ignores", "consumed", "version")


def _to_count(value: Any) -> int:
    """Coerce a stored counter to an int, 0 when missing or not numeric."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def _to_optional_text(value: Any) -> Optional[str]:
    return value or None


def to_view(row: Mapping[str, Any]) -> CoffeeSignalView:
    """Project a storage row (snake-cased columns) onto the API view."""
    counters = {column: _to_count(row.get(column)) for column in COUNTER_COLUMNS}
    return CoffeeSignalView(
        id=row.get("coffee_id"),
        name=row.get("coffee_name"),
        last_feedback=_to_optional_text(row.get("last_feedback")),
        last_feedback_reason=_to_optional_text(row.get("last_feedback_reason")),
        last_seen=row.get("last_seen"),
        updated_at=row.get("updated_at"),
        **counters,
    )
