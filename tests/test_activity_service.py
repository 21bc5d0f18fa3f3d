"""Tests for the orchestration service using in-memory storage callables."""

from __future__ import annotations

from datetime import timedelta
import logging

import pytest

from venue_activity.errors import DuplicateSubmissionError, SubmissionRejectedError
from venue_activity.models import GeoPoint
from venue_activity.services import VenueActivityService, VenueActivityServiceConfig
from venue_activity.services.activity_service import (
    REASON_COOLDOWN,
    REASON_DUPLICATE,
    REASON_OK,
    REASON_TOO_FAR,
)


def _service(rows=None, last_post_at=None, calls=None):
    rows = rows or []

    def fetch_posts(venue_ids, since):
        if calls is not None:
            calls.append((list(venue_ids), since))
        return rows

    return VenueActivityService(
        VenueActivityServiceConfig(
            fetch_posts=fetch_posts,
            fetch_last_post_at=lambda user_id, venue_id: last_post_at,
        )
    )


def _iso(dt):
    return dt.isoformat()


def test_feed_summaries_cover_every_venue(now, row_factory) -> None:
    calls = []
    rows = [
        row_factory(1, venue_id="club-a", rating=4, created_at=_iso(now - timedelta(minutes=10))),
        row_factory(2, venue_id="club-a", rating=3, created_at=_iso(now - timedelta(minutes=70))),
        # older than the 4 hour window even though the fetcher returned it
        row_factory(3, venue_id="club-a", rating=1, created_at=_iso(now - timedelta(hours=5))),
    ]
    service = _service(rows, calls=calls)

    summaries = service.feed_summaries(["club-a", "club-b"], now)

    assert calls == [(["club-a", "club-b"], now - timedelta(hours=4))]
    assert summaries["club-a"].recent_count == 2
    assert summaries["club-a"].average_rating == 3.5
    assert summaries["club-a"].has_live_activity is True
    assert summaries["club-b"].recent_count == 0
    assert summaries["club-a"].to_payload()["average_busyness"] == 3.5


def test_feed_summaries_empty_request_skips_fetch(now) -> None:
    calls = []
    assert _service(calls=calls).feed_summaries([], now) == {}
    assert calls == []


def test_venue_summary_payload(now, row_factory) -> None:
    rows = [row_factory(9, rating=5, created_at=_iso(now - timedelta(minutes=150)))]
    summary = _service(rows).venue_summary("club-a", now)
    payload = summary.to_payload()
    assert payload["recent_count"] == 1
    assert payload["has_live_activity"] is False
    assert payload["latest_vibe_check"]["id"] == 9
    assert payload["latest_vibe_check"]["busyness_rating"] == 5


def test_check_submission_allowed(now, venue) -> None:
    check = _service().check_submission("u1", venue, venue.location, now)
    assert check.allowed is True
    assert check.reason == REASON_OK
    assert check.eligibility.can_post is True


def test_check_submission_too_far(now, venue) -> None:
    far = GeoPoint(venue.location.latitude + 0.01, venue.location.longitude)
    check = _service().check_submission("u1", venue, far, now)
    assert check.allowed is False
    assert check.reason == REASON_TOO_FAR
    assert check.verification.distance_meters > 1000


def test_check_submission_cooling_down(now, venue) -> None:
    service = _service(last_post_at=now - timedelta(minutes=20))
    check = service.check_submission("u1", venue, venue.location, now)
    assert check.reason == REASON_COOLDOWN
    assert check.eligibility.seconds_until_reset == 40 * 60
    assert check.to_payload()["rate_limit"]["can_post"] is False


def test_submit_runs_insert_when_allowed(now, venue) -> None:
    inserted = []
    created = _service().submit(
        "u1", venue, venue.location, now, lambda: inserted.append("row") or "new-id"
    )
    assert created == "new-id"
    assert inserted == ["row"]


def test_submit_rejected_does_not_insert(now, venue) -> None:
    inserted = []
    service = _service(last_post_at=now - timedelta(minutes=5))
    with pytest.raises(SubmissionRejectedError) as excinfo:
        service.submit("u1", venue, venue.location, now, lambda: inserted.append("row"))
    assert inserted == []
    assert excinfo.value.check.reason == REASON_COOLDOWN


def test_submit_duplicate_from_storage_is_rejection(now, venue, caplog) -> None:
    def insert():
        raise DuplicateSubmissionError("unique_user_venue_hour")

    with caplog.at_level(logging.WARNING):
        with pytest.raises(SubmissionRejectedError) as excinfo:
            _service().submit("u1", venue, venue.location, now, insert)
    check = excinfo.value.check
    assert check.reason == REASON_DUPLICATE
    assert check.eligibility.can_post is False
    assert check.eligibility.seconds_until_reset == 3600
    assert "Concurrent vibe check" in caplog.text


def test_custom_logger_receives_records(now, venue, caplog) -> None:
    service = VenueActivityService(
        VenueActivityServiceConfig(
            fetch_posts=lambda ids, since: [],
            fetch_last_post_at=lambda u, v: None,
            logger=logging.getLogger("test.venue_activity"),
        )
    )
    far = GeoPoint(venue.location.latitude + 0.01, venue.location.longitude)
    with caplog.at_level(logging.INFO, logger="test.venue_activity"):
        service.check_submission("u1", venue, far, now)
    records = [r for r in caplog.records if r.name == "test.venue_activity"]
    assert len(records) == 1
    assert "reason=too_far" in records[0].getMessage()


def test_nearby_uses_configured_radius(venue, other_venue) -> None:
    position = GeoPoint(51.5190, -0.1030)
    default = _service()
    assert default.config.nearby_radius_km == 10.0
    assert [v.id for v, _ in default.nearby(position, [other_venue, venue])] == [
        "club-a",
        "club-b",
    ]
    tight = VenueActivityService(
        VenueActivityServiceConfig(
            fetch_posts=lambda ids, since: [],
            fetch_last_post_at=lambda u, v: None,
            nearby_radius_km=1.0,
        )
    )
    assert [v.id for v, _ in tight.nearby(position, [other_venue, venue])] == ["club-a"]
