"""Tests for taste intensity normalization."""
import math

import pytest

from app.core.exceptions import TasteValidationError
from app.core.taste import TASTE_ANCHORS, normalize_taste


@pytest.mark.parametrize(
    "raw,expected",
    [
        (0, 0.0),
        (7, 7.0),
        (6.5, 6.5),
        (10, 10.0),
        (-3, 0.0),
        (42, 10.0),
        (-0.5, 0.0),
        (10.0001, 10.0),
    ],
)
def test_numbers_are_clamped(raw, expected):
    assert normalize_taste(raw, None, "sweetness") == expected
    assert normalize_taste(raw, None, "sweetness") == max(0, min(10, raw))


@pytest.mark.parametrize(
    "raw,expected",
    [("7", 7.0), (" 3.5 ", 3.5), ("-2", 0.0), ("15", 10.0), ("1e1", 10.0)],
)
def test_numeric_strings_are_parsed_and_clamped(raw, expected):
    assert normalize_taste(raw, None, "acidity") == expected


@pytest.mark.parametrize("word,anchor", sorted(TASTE_ANCHORS.items()))
def test_vocabulary_words_map_to_anchor(word, anchor):
    assert normalize_taste(word, None, "body") == anchor
    assert normalize_taste(word.upper(), None, "body") == anchor
    assert normalize_taste(f"  {word}\t", None, "body") == anchor


def test_vocabulary_anchors():
    assert normalize_taste("none", 5, "body") == 0
    assert normalize_taste("Little", 5, "body") == 3
    assert normalize_taste("mild", 5, "body") == 4
    assert normalize_taste("Balanced", 5, "body") == 5
    assert normalize_taste("medium_high", 5, "body") == 7
    assert normalize_taste("Strong", 5, "body") == 8
    assert normalize_taste("VERY-HIGH", 5, "body") == 10


@pytest.mark.parametrize("raw", [None, "", "   ", "extreme", float("nan"), float("inf"), True])
def test_unusable_raw_uses_fallback(raw):
    assert normalize_taste(raw, 6, "bitterness") == 6


def test_fallback_goes_through_the_same_resolution():
    assert normalize_taste(None, "high", "bitterness") == 8
    assert normalize_taste("???", " 2 ", "bitterness") == 2
    assert normalize_taste(None, 99, "bitterness") == 10


def test_raw_wins_over_fallback():
    assert normalize_taste("low", 9, "sweetness") == 3


def test_result_is_always_finite_and_in_range():
    for raw in (-1e9, -1, 0, 3.3, 9.99, 1e9, "-1e9", "1e9"):
        value = normalize_taste(raw, None, "taste")
        assert math.isfinite(value)
        assert 0 <= value <= 10


def test_missing_raw_and_fallback_raises_with_field_name():
    with pytest.raises(TasteValidationError) as exc_info:
        normalize_taste(None, None, "acidity")

    assert exc_info.value.field_name == "acidity"
    assert exc_info.value.details == {"field": "acidity"}
    assert "acidity" in exc_info.value.message


def test_unmapped_raw_and_fallback_raises():
    with pytest.raises(TasteValidationError) as exc_info:
        normalize_taste("extreme", "whatever", "body")

    assert exc_info.value.field_name == "body"


def test_default_field_name():
    with pytest.raises(TasteValidationError) as exc_info:
        normalize_taste(None, None)

    assert exc_info.value.field_name == "taste"


@pytest.mark.parametrize("raw", ["1_0", "nan", "Infinity", "-inf", "0x10", "7 8", "1e999"])
def test_non_decimal_strings_use_fallback(raw):
    assert normalize_taste(raw, 2, "body") == 2
