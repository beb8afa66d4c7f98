"""
Taste intensity normalization.

Form inputs arrive as numbers, numeric strings or words ("little", "medium",
"very_high"). Everything is resolved to a float on the 0-10 scale before it
reaches user_taste_profiles.
"""
import math
import re
from typing import Any, Optional

from app.core.exceptions import TasteValidationError

TASTE_MIN = 0.0
TASTE_MAX = 10.0

# Categorical word -> anchor value
TASTE_ANCHORS = {
    "none": 0,
    "low": 3,
    "little": 3,
    "mild": 4,
    "medium": 5,
    "balanced": 5,
    "medium-high": 7,
    "medium_high": 7,
    "high": 8,
    "strong": 8,
    "very-high": 10,
    "very_high": 10,
}

# Plain decimal notation only; float() alone would also take "1_0" or "nan".
_NUMERIC_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def clamp_taste(value: float) -> float:
    return max(TASTE_MIN, min(TASTE_MAX, float(value)))


def _coerce(value: Any) -> Optional[float]:
    """Resolve a single candidate, or None when it is absent or unusable."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return clamp_taste(value) if math.isfinite(value) else None

    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None

        if _NUMERIC_PATTERN.fullmatch(trimmed):
            numeric = float(trimmed)
            if math.isfinite(numeric):
                return clamp_taste(numeric)

        anchor = TASTE_ANCHORS.get(trimmed.lower())
        if anchor is not None:
            return clamp_taste(anchor)

    return None


def normalize_taste(raw: Any, fallback: Any, field_name: str = "taste") -> float:
    """
    Normalize a taste intensity to the closed interval [0, 10].

    `raw` is tried first, then `fallback`. Each candidate resolves as a finite
    number, a numeric string, or a word from TASTE_ANCHORS (case-insensitive,
    surrounding whitespace ignored).

    Raises:
        TasteValidationError: neither candidate resolves; carries `field_name`.
    """
    normalized = _coerce(raw)
    if normalized is not None:
        return normalized

    normalized = _coerce(fallback)
    if normalized is not None:
        return normalized

    raise TasteValidationError(field_name)
