"""Central error types used across the application."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .services.activity_service import SubmissionCheck


class InputError(ValueError):
    """Raised when coordinates, durations, distances or ratings are malformed."""


class PostRowError(InputError):
    """Raised when a storage row cannot be converted into a model object."""


class VenueActivityError(RuntimeError):
    """Base error for orchestration failures around the pure components."""


class DuplicateSubmissionError(VenueActivityError):
    """Raised by storage insert callables when the per-user/venue uniqueness
    constraint rejects a vibe check."""


class SubmissionRejectedError(VenueActivityError):
    """Raised when a vibe check is refused (too far, cooling down or duplicate)."""

    def __init__(self, message: str, check: "SubmissionCheck") -> None:
        super().__init__(message)
        self.check = check


__all__ = [
    "InputError",
    "PostRowError",
    "VenueActivityError",
    "DuplicateSubmissionError",
    "SubmissionRejectedError",
]
