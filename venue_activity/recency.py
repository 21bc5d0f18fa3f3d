"""Bucketed "time ago" labels."""

from __future__ import annotations

import math
from datetime import datetime

from .errors import InputError
from .utils import require_finite, seconds_between

__all__ = [
    "format_elapsed",
    "format_elapsed_long",
    "format_time_remaining",
    "time_ago",
]

_MINUTES_PER_HOUR = 60
_MINUTES_PER_DAY = 1440


def _elapsed_minutes(elapsed_seconds: float) -> int:
    elapsed = require_finite(elapsed_seconds, "elapsed_seconds")
    if elapsed < 0:
        raise InputError(
            f"elapsed_seconds must be >= 0, got {elapsed_seconds!r}; "
            "clamp clock skew before formatting"
        )
    return math.floor(elapsed / 60)


def format_elapsed(elapsed_seconds: float) -> str:
    """Compact label: ``Just now``, ``30m ago``, ``1h ago``, ``1d ago``.

    Minutes are floored before bucketing, so 59 seconds is still "Just now".
    """

    minutes = _elapsed_minutes(elapsed_seconds)
    if minutes == 0:
        return "Just now"
    if minutes < _MINUTES_PER_HOUR:
        return f"{minutes}m ago"
    if minutes < _MINUTES_PER_DAY:
        return f"{minutes // _MINUTES_PER_HOUR}h ago"
    return f"{minutes // _MINUTES_PER_DAY}d ago"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_elapsed_long(elapsed_seconds: float) -> str:
    """Same buckets as :func:`format_elapsed`, spelled out for feed cards."""

    minutes = _elapsed_minutes(elapsed_seconds)
    if minutes == 0:
        return "Just now"
    if minutes < _MINUTES_PER_HOUR:
        return _plural(minutes, "minute")
    if minutes < _MINUTES_PER_DAY:
        return _plural(minutes // _MINUTES_PER_HOUR, "hour")
    return _plural(minutes // _MINUTES_PER_DAY, "day")


def time_ago(created_at: datetime, now: datetime, long: bool = False) -> str:
    """Format the age of ``created_at``; timestamps ahead of ``now`` read as just now."""

    elapsed = max(0.0, seconds_between(created_at, now))
    return format_elapsed_long(elapsed) if long else format_elapsed(elapsed)


def format_time_remaining(seconds: float) -> str:
    """Format a cooldown remainder as ``Xm Ys``, or ``Ys`` under a minute."""

    remaining = require_finite(seconds, "seconds")
    if remaining < 0:
        raise InputError(f"seconds must be >= 0, got {seconds!r}")
    mins, sec = divmod(math.floor(remaining), 60)
    if mins > 0:
        return f"{mins}m {sec}s"
    return f"{sec}s"
