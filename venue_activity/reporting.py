"""Dashboard activity report.

Pure function that turns a batch of venue summaries into a DataFrame ready
for the owner/admin dashboard table, mirroring the feed ordering used by the
mobile client.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Mapping, Sequence

import pandas as pd

from .activity_aggregation import rank_by_activity
from .busyness import label_for_average
from .models import ActivitySummary, Venue, VenueId
from .recency import time_ago

VENUE_ID_COL = "Venue ID"
VENUE_COL = "Venue"
COUNT_COL = "Vibe Checks"
AVERAGE_COL = "Average Busyness"
LABEL_COL = "Busyness"
LIVE_COL = "Live"
LAST_COL = "Last Vibe Check"

__all__ = ["build_activity_frame"]


def _row_for_venue(venue: Venue, summary: ActivitySummary, now: datetime) -> dict:
    latest = summary.latest_post
    return {
        VENUE_ID_COL: venue.id,
        VENUE_COL: venue.name,
        COUNT_COL: summary.recent_count,
        AVERAGE_COL: summary.average_rating,
        LABEL_COL: label_for_average(summary.average_rating),
        LIVE_COL: summary.has_live_activity,
        LAST_COL: time_ago(latest.created_at, now) if latest else None,
    }


def build_activity_frame(
    venues: Sequence[Venue],
    summaries: Mapping[VenueId, ActivitySummary],
    now: datetime,
) -> pd.DataFrame:
    """Return one row per venue, live venues first then busiest first.

    Venues absent from ``summaries`` are reported with zero activity.
    """

    from .config import REPORT_COLUMN_ORDER

    by_id = {venue.id: venue for venue in venues}
    ordered_ids = rank_by_activity([venue.id for venue in venues], summaries)
    empty = ActivitySummary.empty()
    rows: List[dict] = [
        _row_for_venue(by_id[venue_id], summaries.get(venue_id, empty), now)
        for venue_id in ordered_ids
    ]
    if not rows:
        return pd.DataFrame(columns=list(REPORT_COLUMN_ORDER))
    df = pd.DataFrame(rows)
    # Keep the nullable average as floats (NaN for venues without posts).
    df[AVERAGE_COL] = pd.to_numeric(df[AVERAGE_COL], errors="coerce")
    # Text columns stay object dtype so missing labels remain None.
    for col in (LABEL_COL, LAST_COL):
        df[col] = pd.Series([row[col] for row in rows], index=df.index, dtype=object)
    preferred_cols = [c for c in REPORT_COLUMN_ORDER if c in df.columns]
    remaining = [c for c in df.columns if c not in preferred_cols]
    return df[preferred_cols + remaining].reset_index(drop=True)
