"""Great-circle geometry and the venue geofence check.

Pure functions: no I/O, no clock, no logging. Obtaining the user's position
(device GPS, permissions) is the caller's job; the functions here only work
on two well-formed points.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from .errors import InputError
from .models import GeoPoint, GeofenceVerification, Venue
from .utils import require_finite

EARTH_RADIUS_M = 6_371_000.0
DEFAULT_RADIUS_METERS = 100.0

__all__ = [
    "EARTH_RADIUS_M",
    "DEFAULT_RADIUS_METERS",
    "haversine_m",
    "validate_point",
    "distance_between",
    "verify",
    "nearby_venues",
]


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in metres between two lat/lon points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    )
    # Rounding can push near-antipodal pairs just outside [0, 1].
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def validate_point(point: GeoPoint, label: str = "point") -> GeoPoint:
    """Raise :class:`InputError` unless ``point`` holds in-range coordinates."""

    lat = require_finite(point.latitude, f"{label} latitude")
    lon = require_finite(point.longitude, f"{label} longitude")
    if not -90.0 <= lat <= 90.0:
        raise InputError(f"{label} latitude {lat} outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise InputError(f"{label} longitude {lon} outside [-180, 180]")
    return point


def distance_between(a: GeoPoint, b: GeoPoint) -> float:
    """Validated great-circle distance in metres."""

    validate_point(a, "first point")
    validate_point(b, "second point")
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def verify(
    user_position: GeoPoint,
    venue: Venue,
    radius_meters: float = DEFAULT_RADIUS_METERS,
) -> GeofenceVerification:
    """Check whether ``user_position`` lies inside the venue's geofence.

    The boundary is inclusive: a distance equal to ``radius_meters`` passes.
    The raw (unrounded) distance is reported back so callers can describe it.

    Raises:
        InputError: either point is out of range, or the radius is negative
            or non-finite.
    """

    radius = require_finite(radius_meters, "radius_meters")
    if radius < 0:
        raise InputError(f"radius_meters must be >= 0, got {radius_meters!r}")
    validate_point(user_position, "user position")
    validate_point(venue.location, f"venue {venue.name!r} location")
    distance = haversine_m(
        user_position.latitude,
        user_position.longitude,
        venue.location.latitude,
        venue.location.longitude,
    )
    return GeofenceVerification(
        is_valid=distance <= radius,
        distance_meters=distance,
        venue_name=venue.name,
    )


def nearby_venues(
    position: GeoPoint,
    venues: Iterable[Venue],
    radius_km: float,
) -> List[Tuple[Venue, float]]:
    """Return ``(venue, distance_km)`` pairs within ``radius_km``, nearest first.

    Ties keep the input order.
    """

    radius = require_finite(radius_km, "radius_km")
    if radius < 0:
        raise InputError(f"radius_km must be >= 0, got {radius_km!r}")
    validate_point(position, "search position")
    hits: List[Tuple[Venue, float]] = []
    for venue in venues:
        distance_km = distance_between(position, venue.location) / 1000.0
        if distance_km <= radius:
            hits.append((venue, distance_km))
    hits.sort(key=lambda pair: pair[1])
    return hits
