"""Venue activity service.

Thin orchestration over the pure components: reads rows through injected
storage callables, converts them, and hands them to the aggregator, the
geofence check and the submission gate. Storage access is never performed
here directly, which keeps the service testable with plain lambdas.

Submitting a vibe check is a two-step contract: ``check_submission`` reads
current eligibility, then the caller's ``insert`` runs under a storage-level
uniqueness constraint. A ``DuplicateSubmissionError`` from the insert means a
concurrent submission won the race and is reported as a rejection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .. import config
from ..activity_aggregation import filter_recent, summarize, summarize_batch
from ..errors import DuplicateSubmissionError, SubmissionRejectedError
from ..geofence import nearby_venues, verify
from ..models import (
    ActivityPost,
    ActivitySummary,
    BatchActivitySummary,
    GeoPoint,
    GeofenceVerification,
    SubmissionEligibility,
    UserId,
    Venue,
    VenueId,
)
from ..post_rows import posts_from_rows
from ..submission_gate import evaluate

PostRows = Iterable[Mapping[str, Any]]
PostFetcher = Callable[[Sequence[VenueId], datetime], PostRows]
LastPostFetcher = Callable[[UserId, VenueId], Optional[datetime]]
T = TypeVar("T")

REASON_OK = "ok"
REASON_TOO_FAR = "too_far"
REASON_COOLDOWN = "cooldown"
REASON_DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class SubmissionCheck:
    """Combined geofence and cooldown verdict for one attempted vibe check."""

    verification: GeofenceVerification
    eligibility: SubmissionEligibility
    reason: str = REASON_OK

    @property
    def allowed(self) -> bool:
        return self.reason == REASON_OK

    def to_payload(self) -> dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason,
            "location": self.verification.to_payload(),
            "rate_limit": self.eligibility.to_payload(),
        }


@dataclass(slots=True)
class VenueActivityServiceConfig:
    fetch_posts: PostFetcher
    fetch_last_post_at: LastPostFetcher
    geofence_radius_meters: float = field(
        default_factory=lambda: config.GEOFENCE_RADIUS_METERS
    )
    cooldown_seconds: int = field(
        default_factory=lambda: config.SUBMISSION_COOLDOWN_SECONDS
    )
    recent_window_seconds: int = field(
        default_factory=lambda: config.RECENT_WINDOW_SECONDS
    )
    live_window_seconds: int = field(
        default_factory=lambda: config.LIVE_WINDOW_SECONDS
    )
    nearby_radius_km: float = field(default_factory=lambda: config.NEARBY_RADIUS_KM)
    logger: logging.Logger | None = None


class VenueActivityService:
    def __init__(self, config: VenueActivityServiceConfig):
        self.config = config
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def _load_recent(
        self, venue_ids: Sequence[VenueId], now: datetime
    ) -> List[ActivityPost]:
        since = now - timedelta(seconds=self.config.recent_window_seconds)
        rows = self.config.fetch_posts(list(venue_ids), since)
        # The fetcher may return a wider window than asked for.
        posts = filter_recent(
            posts_from_rows(rows), now, self.config.recent_window_seconds
        )
        self._log.debug(
            "Loaded %d recent vibe checks for %d venues since %s",
            len(posts),
            len(venue_ids),
            since.isoformat(),
        )
        return posts

    def venue_summary(self, venue_id: VenueId, now: datetime) -> ActivitySummary:
        """Current activity for a single venue (detail view)."""

        posts = [p for p in self._load_recent([venue_id], now) if p.venue_id == venue_id]
        return summarize(posts, now, self.config.live_window_seconds)

    def feed_summaries(
        self, venue_ids: Sequence[VenueId], now: datetime
    ) -> BatchActivitySummary:
        """Current activity for every venue in a list or feed."""

        if not venue_ids:
            return {}
        posts = self._load_recent(venue_ids, now)
        summaries = summarize_batch(
            posts, venue_ids, now, self.config.live_window_seconds
        )
        live = sum(1 for s in summaries.values() if s.has_live_activity)
        self._log.info(
            "Summarised activity for %d venues (%d live)", len(summaries), live
        )
        return summaries

    def nearby(
        self, position: GeoPoint, venues: Iterable[Venue]
    ) -> List[Tuple[Venue, float]]:
        """Venues within the configured search radius, nearest first."""

        hits = nearby_venues(position, venues, self.config.nearby_radius_km)
        self._log.debug(
            "Found %d venues within %.1fkm", len(hits), self.config.nearby_radius_km
        )
        return hits

    def check_submission(
        self,
        user_id: UserId,
        venue: Venue,
        position: GeoPoint,
        now: datetime,
    ) -> SubmissionCheck:
        """Geofence first, then the cooldown read for this (user, venue) pair."""

        verification = verify(position, venue, self.config.geofence_radius_meters)
        last_post_at = self.config.fetch_last_post_at(user_id, venue.id)
        eligibility = evaluate(last_post_at, now, self.config.cooldown_seconds)
        if not verification.is_valid:
            reason = REASON_TOO_FAR
        elif not eligibility.can_post:
            reason = REASON_COOLDOWN
        else:
            reason = REASON_OK
        if reason != REASON_OK:
            self._log.info(
                "Vibe check refused user=%s venue=%s reason=%s distance=%.1fm",
                user_id,
                venue.id,
                reason,
                verification.distance_meters,
            )
        return SubmissionCheck(
            verification=verification, eligibility=eligibility, reason=reason
        )

    def submit(
        self,
        user_id: UserId,
        venue: Venue,
        position: GeoPoint,
        now: datetime,
        insert: Callable[[], T],
    ) -> T:
        """Check eligibility and run ``insert`` when allowed.

        Raises:
            SubmissionRejectedError: the check failed, or storage rejected the
                insert as a duplicate.
        """

        check = self.check_submission(user_id, venue, position, now)
        if not check.allowed:
            raise SubmissionRejectedError(
                f"Vibe check for {venue.name!r} refused: {check.reason}", check
            )
        try:
            created = insert()
        except DuplicateSubmissionError as exc:
            self._log.warning(
                "Concurrent vibe check detected user=%s venue=%s: %s",
                user_id,
                venue.id,
                exc,
            )
            duplicate = SubmissionCheck(
                verification=check.verification,
                eligibility=SubmissionEligibility(
                    can_post=False,
                    last_post_at=now,
                    seconds_until_reset=max(1, int(self.config.cooldown_seconds)),
                ),
                reason=REASON_DUPLICATE,
            )
            raise SubmissionRejectedError(
                f"Vibe check for {venue.name!r} refused: {REASON_DUPLICATE}",
                duplicate,
            ) from exc
        self._log.info("Recorded vibe check user=%s venue=%s", user_id, venue.id)
        return created


__all__ = [
    "SubmissionCheck",
    "VenueActivityService",
    "VenueActivityServiceConfig",
    "REASON_OK",
    "REASON_TOO_FAR",
    "REASON_COOLDOWN",
    "REASON_DUPLICATE",
]
