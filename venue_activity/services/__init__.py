"""Service layer package.

Exports high-level services consumed by request handlers and dashboard jobs.
"""

from .activity_service import (
    SubmissionCheck,
    VenueActivityService,
    VenueActivityServiceConfig,
)

__all__ = ["SubmissionCheck", "VenueActivityService", "VenueActivityServiceConfig"]
