from __future__ import annotations

import math

from venue_activity.activity_aggregation import summarize_batch
from venue_activity.config import REPORT_COLUMN_ORDER
from venue_activity.models import GeoPoint, Venue
from venue_activity.reporting import build_activity_frame

LIVE = 2 * 3600


def test_activity_frame_orders_and_labels(now, post_factory, venue, other_venue) -> None:
    quiet = Venue(id="club-c", name="The Cause", location=GeoPoint(51.5470, -0.0300))
    posts = [
        post_factory(1, venue_id="club-b", rating=5, minutes_ago=3),
        post_factory(2, venue_id="club-b", rating=4, minutes_ago=25),
        post_factory(3, venue_id="club-a", rating=2, minutes_ago=200),
    ]
    venues = [venue, quiet, other_venue]
    summaries = summarize_batch(posts, [v.id for v in venues], now, LIVE)

    df = build_activity_frame(venues, summaries, now)

    assert list(df.columns) == REPORT_COLUMN_ORDER
    assert list(df["Venue ID"]) == ["club-b", "club-a", "club-c"]
    top = df.iloc[0]
    assert top["Vibe Checks"] == 2
    assert top["Average Busyness"] == 4.5
    assert top["Busyness"] == "Packed"
    assert bool(top["Live"]) is True
    assert top["Last Vibe Check"] == "3m ago"

    empty = df.iloc[2]
    assert empty["Vibe Checks"] == 0
    assert math.isnan(empty["Average Busyness"])
    assert empty["Busyness"] is None
    assert empty["Last Vibe Check"] is None


def test_activity_frame_without_venues(now) -> None:
    df = build_activity_frame([], {}, now)
    assert df.empty
    assert list(df.columns) == REPORT_COLUMN_ORDER


def test_activity_frame_missing_summary_reported_as_zero(now, venue) -> None:
    df = build_activity_frame([venue], {}, now)
    assert df.iloc[0]["Vibe Checks"] == 0


def test_activity_frame_keeps_missing_labels_as_none(now, venue, other_venue) -> None:
    df = build_activity_frame([venue, other_venue], {}, now)
    assert df["Busyness"].dtype == object
    assert df["Last Vibe Check"].dtype == object
    assert list(df["Busyness"]) == [None, None]
    assert list(df["Last Vibe Check"]) == [None, None]
