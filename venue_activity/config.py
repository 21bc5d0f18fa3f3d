"""Central configuration for the Venue Activity Engine.

All values are constants imported by the rest of the package. The pure
components take every threshold as an explicit argument; only the service
layer falls back to these defaults. Values can be overridden through
environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Geofence
# ---------------------------------------------------------------------------
# Maximum distance (metres) between a user and a venue for a vibe check to be
# accepted. The boundary itself is inside the fence.
GEOFENCE_RADIUS_METERS = _env_float("VENUE_GEOFENCE_RADIUS_METERS", 100.0)

# Default search radius (kilometres) for the nearby-venues helper.
NEARBY_RADIUS_KM = _env_float("VENUE_NEARBY_RADIUS_KM", 10.0)


# ---------------------------------------------------------------------------
# Submission throttling
# ---------------------------------------------------------------------------
# One vibe check per user per venue per hour.
SUBMISSION_COOLDOWN_SECONDS = _env_int("VENUE_SUBMISSION_COOLDOWN_SECONDS", 3600)


# ---------------------------------------------------------------------------
# Activity windows
# ---------------------------------------------------------------------------
# Posts newer than this are fetched and aggregated for a venue.
RECENT_WINDOW_SECONDS = _env_int("VENUE_RECENT_WINDOW_SECONDS", 4 * 3600)

# A venue is flagged as live when at least one post is this fresh.
LIVE_WINDOW_SECONDS = _env_int("VENUE_LIVE_WINDOW_SECONDS", 2 * 3600)


# ---------------------------------------------------------------------------
# Post validation
# ---------------------------------------------------------------------------
MIN_RATING = 1
MAX_RATING = 5

# Mirrors the CHECK constraint on the vibe_checks.comment column.
MAX_COMMENT_LENGTH = 280


# ---------------------------------------------------------------------------
# Dashboard report
# ---------------------------------------------------------------------------
# Column order used for the dashboard activity frame. Missing columns are
# ignored.
REPORT_COLUMN_ORDER = [
    "Venue ID",
    "Venue",
    "Vibe Checks",
    "Average Busyness",
    "Busyness",
    "Live",
    "Last Vibe Check",
]
