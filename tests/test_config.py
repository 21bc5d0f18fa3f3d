from __future__ import annotations

import importlib

import venue_activity.config as config


def test_defaults_match_product_values() -> None:
    assert config.GEOFENCE_RADIUS_METERS == 100.0
    assert config.SUBMISSION_COOLDOWN_SECONDS == 3600
    assert config.RECENT_WINDOW_SECONDS == 4 * 3600
    assert config.LIVE_WINDOW_SECONDS == 2 * 3600
    assert config.MAX_COMMENT_LENGTH == 280


def test_env_overrides_are_applied(monkeypatch) -> None:
    monkeypatch.setenv("VENUE_SUBMISSION_COOLDOWN_SECONDS", "1800")
    monkeypatch.setenv("VENUE_GEOFENCE_RADIUS_METERS", "150.5")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.SUBMISSION_COOLDOWN_SECONDS == 1800
        assert reloaded.GEOFENCE_RADIUS_METERS == 150.5
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_invalid_env_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("VENUE_LIVE_WINDOW_SECONDS", "two hours")
    assert config._env_int("VENUE_LIVE_WINDOW_SECONDS", 7200) == 7200
    monkeypatch.setenv("VENUE_NEARBY_RADIUS_KM", "far")
    assert config._env_float("VENUE_NEARBY_RADIUS_KM", 10.0) == 10.0
