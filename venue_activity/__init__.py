"""Venue Activity Engine package."""

from .errors import InputError, PostRowError, SubmissionRejectedError
from .models import (
    ActivityPost,
    ActivitySummary,
    GeoPoint,
    GeofenceVerification,
    SubmissionEligibility,
    Venue,
)

__all__ = [
    "ActivityPost",
    "ActivitySummary",
    "GeoPoint",
    "GeofenceVerification",
    "SubmissionEligibility",
    "Venue",
    "InputError",
    "PostRowError",
    "SubmissionRejectedError",
]
