"""Value types consumed and produced by the engine.

Consumed types (``GeoPoint``, ``Venue``, ``ActivityPost``) mirror rows owned
by the relational store. Produced types are computed fresh per call and
expose ``to_payload`` so callers can drop them straight into a JSON body.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Hashable

VenueId = Hashable
UserId = Hashable


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Venue:
    id: VenueId
    name: str
    location: GeoPoint


@dataclass(frozen=True, slots=True)
class ActivityPost:
    """One vibe check: a rated, timestamped status update about a venue.

    ``rating`` is the 1-5 busyness score. ``user_location`` is the position
    the post was submitted from, when the client reported one.
    """

    id: Hashable
    venue_id: VenueId
    user_id: UserId
    rating: int
    created_at: datetime
    comment: str | None = None
    photo_url: str | None = None
    user_location: GeoPoint | None = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "venue_id": self.venue_id,
            "user_id": self.user_id,
            "busyness_rating": self.rating,
            "created_at": self.created_at.isoformat(),
            "comment": self.comment,
            "photo_url": self.photo_url,
            "user_latitude": self.user_location.latitude
            if self.user_location
            else None,
            "user_longitude": self.user_location.longitude
            if self.user_location
            else None,
        }


@dataclass(frozen=True, slots=True)
class GeofenceVerification:
    is_valid: bool
    distance_meters: float
    venue_name: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "distance_meters": self.distance_meters,
            "venue_name": self.venue_name,
        }


@dataclass(frozen=True, slots=True)
class SubmissionEligibility:
    """Outcome of the cooldown check.

    ``seconds_until_reset`` is set exactly when ``can_post`` is False.
    """

    can_post: bool
    last_post_at: datetime | None = None
    seconds_until_reset: int | None = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "can_post": self.can_post,
            "last_post_at": self.last_post_at.isoformat()
            if self.last_post_at
            else None,
            "seconds_until_reset": self.seconds_until_reset,
        }


@dataclass(frozen=True, slots=True)
class ActivitySummary:
    """Current activity for one venue.

    An empty summary has ``recent_count == 0``, no average, no live flag and
    no latest post.
    """

    recent_count: int
    average_rating: float | None
    has_live_activity: bool
    latest_post: ActivityPost | None

    @classmethod
    def empty(cls) -> "ActivitySummary":
        return cls(
            recent_count=0,
            average_rating=None,
            has_live_activity=False,
            latest_post=None,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "recent_count": self.recent_count,
            "average_busyness": self.average_rating,
            "has_live_activity": self.has_live_activity,
            "latest_vibe_check": self.latest_post.to_payload()
            if self.latest_post
            else None,
        }


BatchActivitySummary = Dict[VenueId, ActivitySummary]


__all__ = [
    "VenueId",
    "UserId",
    "GeoPoint",
    "Venue",
    "ActivityPost",
    "GeofenceVerification",
    "SubmissionEligibility",
    "ActivitySummary",
    "BatchActivitySummary",
]
