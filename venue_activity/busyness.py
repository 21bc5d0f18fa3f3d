"""Busyness rating labels and validation."""

from __future__ import annotations

import numbers
from typing import Any, Dict

from .config import MAX_RATING, MIN_RATING
from .errors import InputError
from .utils import require_finite, round_half_up

__all__ = ["BUSYNESS_LABELS", "validate_rating", "busyness_label", "label_for_average"]

BUSYNESS_LABELS: Dict[int, str] = {
    1: "Dead",
    2: "Quiet",
    3: "Moderate",
    4: "Busy",
    5: "Packed",
}


def validate_rating(value: Any) -> int:
    """Return ``value`` as an int rating or raise :class:`InputError`.

    Integral floats (``3.0``, as pandas hands back for nullable columns) are
    accepted; bools and fractional values are not.
    """

    if isinstance(value, bool):
        raise InputError(f"rating must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        rating = int(value)
    else:
        number = require_finite(value, "rating")
        if not number.is_integer():
            raise InputError(f"rating must be an integer, got {value!r}")
        rating = int(number)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InputError(f"rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
    return rating


def busyness_label(rating: Any) -> str:
    return BUSYNESS_LABELS[validate_rating(rating)]


def label_for_average(average: float | None) -> str | None:
    """Label an average rating by rounding it half-up to the nearest level."""

    if average is None:
        return None
    return busyness_label(int(round_half_up(average)))
