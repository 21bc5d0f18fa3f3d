"""Human-readable distance buckets shown next to geofence results."""

from __future__ import annotations

from .errors import InputError
from .utils import require_finite, round_half_up

__all__ = ["describe"]


def describe(distance_meters: float) -> str:
    """Map a distance in metres to a stable label.

    Buckets are left-inclusive and checked in order; every rounding step is
    half-up, so 999 m reads "1000m away" and 2300 m reads "2.3km away".

    Raises:
        InputError: negative or non-finite distance.
    """

    distance = require_finite(distance_meters, "distance_meters")
    if distance < 0:
        raise InputError(f"distance_meters must be >= 0, got {distance_meters!r}")

    if distance < 50:
        return "Very close"
    if distance < 100:
        return "Close enough"
    if distance < 500:
        return f"{int(round_half_up(distance))}m away"
    if distance < 1000:
        hundreds = int(round_half_up(distance / 100))
        return f"{hundreds * 100}m away"
    km = round_half_up(distance / 1000, 1)
    return f"{km:.1f}km away"
