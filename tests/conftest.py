"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable factories for venues, vibe
checks and storage rows so individual test files stay short.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from venue_activity.models import ActivityPost, GeoPoint, Venue

NOW = datetime(2025, 6, 14, 23, 30, tzinfo=timezone.utc)


# --- Factory helpers -------------------------------------------------
def make_post(post_id, venue_id="club-a", rating=3, minutes_ago=10, user_id="u1", now=NOW):
    return ActivityPost(
        id=post_id,
        venue_id=venue_id,
        user_id=user_id,
        rating=rating,
        created_at=now - timedelta(minutes=minutes_ago),
    )


def make_row(post_id, venue_id="club-a", rating=3, created_at="2025-06-14T23:00:00Z", **extra):
    row = {
        "id": post_id,
        "venue_id": venue_id,
        "user_id": "u1",
        "rating": rating,
        "created_at": created_at,
        "comment": None,
        "photo_url": None,
        "user_latitude": None,
        "user_longitude": None,
    }
    row.update(extra)
    return row


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def now():
    return NOW


@pytest.fixture
def venue():
    # Fabric, London
    return Venue(id="club-a", name="Fabric", location=GeoPoint(51.5196, -0.1025))


@pytest.fixture
def other_venue():
    # Ministry of Sound, London
    return Venue(id="club-b", name="Ministry of Sound", location=GeoPoint(51.4979, -0.0998))


@pytest.fixture
def post_factory():
    return make_post


@pytest.fixture
def row_factory():
    return make_row
