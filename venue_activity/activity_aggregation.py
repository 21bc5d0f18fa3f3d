"""Venue activity aggregation helpers.

Pure transformation: given vibe checks already fetched for one or more
venues it produces per-venue ``ActivitySummary`` values used by the venue
detail view, the live feed and dashboard batch queries. Inclusion filtering
("last 4 hours") is the caller's decision; ``filter_recent`` is provided for
callers that fetch wider than they aggregate.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Sequence

from .errors import InputError
from .models import ActivityPost, ActivitySummary, BatchActivitySummary, VenueId
from .utils import require_finite, round_half_up, seconds_between, to_utc_aware

__all__ = [
    "summarize",
    "summarize_batch",
    "rank_by_activity",
    "filter_recent",
]


def _window_seconds(value: float, name: str) -> float:
    window = require_finite(value, name)
    if window < 0:
        raise InputError(f"{name} must be >= 0, got {value!r}")
    return window


def _average_rating(posts: Sequence[ActivityPost]) -> float:
    # Exact decimal mean so that e.g. 2.45 does not round down through binary error.
    total = Decimal(sum(p.rating for p in posts))
    mean = total / Decimal(len(posts))
    return float(round_half_up(mean, 1))


def _latest(posts: Sequence[ActivityPost]) -> ActivityPost:
    return max(posts, key=lambda p: (to_utc_aware(p.created_at), p.id))


def _summarize(
    posts: Sequence[ActivityPost], now: datetime, live_window: float
) -> ActivitySummary:
    if not posts:
        return ActivitySummary.empty()
    has_live = any(seconds_between(p.created_at, now) <= live_window for p in posts)
    return ActivitySummary(
        recent_count=len(posts),
        average_rating=_average_rating(posts),
        has_live_activity=has_live,
        latest_post=_latest(posts),
    )


def summarize(
    posts: Sequence[ActivityPost],
    now: datetime,
    live_window_seconds: float,
) -> ActivitySummary:
    """Summarise every post given for a single venue.

    ``average_rating`` is the mean rating rounded half-up to one decimal.
    ``has_live_activity`` is set when any post is at most
    ``live_window_seconds`` old. Ties on ``created_at`` for the latest post
    go to the highest ``id``.
    """

    live_window = _window_seconds(live_window_seconds, "live_window_seconds")
    return _summarize(list(posts), now, live_window)


def summarize_batch(
    posts: Iterable[ActivityPost],
    venue_ids: Iterable[VenueId],
    now: datetime,
    live_window_seconds: float,
) -> BatchActivitySummary:
    """Summarise posts for many venues at once.

    Every requested venue gets an entry, using the empty summary when it has
    no posts, so callers can sort a venue list without existence checks.
    Posts for venues that were not requested are ignored.
    """

    live_window = _window_seconds(live_window_seconds, "live_window_seconds")
    wanted = list(dict.fromkeys(venue_ids))
    wanted_set = set(wanted)
    grouped: Dict[VenueId, List[ActivityPost]] = defaultdict(list)
    for post in posts:
        if post.venue_id in wanted_set:
            grouped[post.venue_id].append(post)
    return {
        venue_id: _summarize(grouped.get(venue_id, []), now, live_window)
        for venue_id in wanted
    }


def rank_by_activity(
    venue_ids: Sequence[VenueId],
    summaries: Mapping[VenueId, ActivitySummary],
) -> List[VenueId]:
    """Order venues for the live feed.

    Live venues first, then by ``recent_count`` descending; the sort is
    stable so remaining ties keep the input order. Venues missing from
    ``summaries`` rank as empty.
    """

    empty = ActivitySummary.empty()

    def _key(venue_id: VenueId) -> tuple[bool, int]:
        summary = summaries.get(venue_id, empty)
        return (not summary.has_live_activity, -summary.recent_count)

    return sorted(venue_ids, key=_key)


def filter_recent(
    posts: Iterable[ActivityPost],
    now: datetime,
    window_seconds: float,
) -> List[ActivityPost]:
    """Keep posts created at or after ``now - window_seconds``."""

    window = _window_seconds(window_seconds, "window_seconds")
    return [p for p in posts if seconds_between(p.created_at, now) <= window]
