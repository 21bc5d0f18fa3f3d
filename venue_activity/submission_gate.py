"""Per-(user, venue) submission throttling.

The gate is stateless: the caller supplies the timestamp of the user's most
recent vibe check for the venue (one ``ORDER BY created_at DESC LIMIT 1``
read) and the current time. Closing the read-then-insert race is left to a
uniqueness constraint in storage.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable

from .errors import InputError
from .models import ActivityPost, SubmissionEligibility, UserId, VenueId
from .utils import require_finite, seconds_between, to_utc_aware

__all__ = ["evaluate", "latest_post_at"]


def evaluate(
    last_post_at: datetime | None,
    now: datetime,
    cooldown_seconds: int,
) -> SubmissionEligibility:
    """Decide whether a new post is allowed right now.

    Args:
        last_post_at: Creation time of the user's latest post for the venue,
            or ``None`` when they never posted there.
        now: Current instant.
        cooldown_seconds: Minimum gap between two posts.

    Returns:
        Eligibility with ``seconds_until_reset`` (always >= 1) when blocked.

    Raises:
        InputError: negative or non-finite cooldown.
    """

    cooldown = require_finite(cooldown_seconds, "cooldown_seconds")
    if cooldown < 0:
        raise InputError(f"cooldown_seconds must be >= 0, got {cooldown_seconds!r}")
    if last_post_at is None:
        return SubmissionEligibility(can_post=True)

    # A post stamped after `now` means clock skew; treat it as just posted.
    elapsed = max(0.0, seconds_between(last_post_at, now))
    if elapsed >= cooldown:
        return SubmissionEligibility(can_post=True, last_post_at=last_post_at)
    return SubmissionEligibility(
        can_post=False,
        last_post_at=last_post_at,
        seconds_until_reset=max(1, math.ceil(cooldown - elapsed)),
    )


def latest_post_at(
    posts: Iterable[ActivityPost],
    user_id: UserId,
    venue_id: VenueId,
) -> datetime | None:
    """Most recent ``created_at`` among ``posts`` for the given pair."""

    latest: datetime | None = None
    for post in posts:
        if post.user_id != user_id or post.venue_id != venue_id:
            continue
        if latest is None or to_utc_aware(post.created_at) > to_utc_aware(latest):
            latest = post.created_at
    return latest
