"""Row conversion layer (storage rows -> model objects, with validation).

Accepts rows from the ``activity_posts`` / ``venues`` queries either as an
iterable of mappings (what a DB driver returns) or as a pandas DataFrame
(dashboard batch exports). Separated from the aggregation so the pure
components only ever see validated model objects.
"""

from __future__ import annotations

import numbers
from datetime import datetime
from typing import Any, Hashable, Iterable, List, Mapping

import pandas as pd

from .busyness import validate_rating
from .config import MAX_COMMENT_LENGTH
from .errors import InputError, PostRowError
from .geofence import validate_point
from .models import ActivityPost, GeoPoint, Venue
from .utils import parse_iso_datetime, to_utc_aware

__all__ = [
    "REQUIRED_POST_COLUMNS",
    "REQUIRED_VENUE_COLUMNS",
    "post_from_row",
    "posts_from_rows",
    "venue_from_row",
    "venues_from_rows",
]

_RATING_KEYS = ("rating", "busyness_rating")
REQUIRED_POST_COLUMNS = {"id", "venue_id", "user_id", "created_at"}
REQUIRED_VENUE_COLUMNS = {"id", "name", "latitude", "longitude"}

Row = Mapping[str, Any]


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _clean_id(value: object, field: str, row_label: str) -> Hashable:
    if _is_blank(value):
        raise PostRowError(f"{row_label} missing '{field}'")
    if isinstance(value, bool):
        raise PostRowError(f"{row_label} has invalid '{field}' {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        # pandas upcasts integer columns to float when any cell is missing
        return int(value)
    return str(value).strip()


def _clean_text(value: object) -> str | None:
    if _is_blank(value):
        return None
    return str(value).strip()


def _parse_created_at(value: object, row_label: str) -> datetime:
    if _is_blank(value):
        raise PostRowError(f"{row_label} missing 'created_at'")
    if isinstance(value, pd.Timestamp):
        return to_utc_aware(value.to_pydatetime())
    if isinstance(value, datetime):
        return to_utc_aware(value)
    if isinstance(value, str):
        parsed = parse_iso_datetime(value)
        if parsed is not None:
            return to_utc_aware(parsed)
    raise PostRowError(f"{row_label} has unparseable 'created_at' {value!r}")


def _parse_rating(row: Row, row_label: str) -> int:
    for key in _RATING_KEYS:
        if key in row and not _is_blank(row[key]):
            try:
                return validate_rating(row[key])
            except InputError as exc:
                raise PostRowError(f"{row_label}: {exc}") from exc
    raise PostRowError(f"{row_label} missing rating (expected one of {_RATING_KEYS})")


def _parse_user_location(row: Row, row_label: str) -> GeoPoint | None:
    lat = row.get("user_latitude")
    lon = row.get("user_longitude")
    if _is_blank(lat) or _is_blank(lon):
        return None
    try:
        point = GeoPoint(latitude=float(lat), longitude=float(lon))
        return validate_point(point, "user location")
    except (TypeError, ValueError) as exc:
        raise PostRowError(f"{row_label}: invalid user location ({exc})") from exc


def post_from_row(row: Row, row_label: str = "row") -> ActivityPost:
    """Convert one ``activity_posts`` row into an :class:`ActivityPost`.

    Raises:
        PostRowError: a required field is missing or malformed.
    """

    comment = _clean_text(row.get("comment"))
    if comment is not None and len(comment) > MAX_COMMENT_LENGTH:
        raise PostRowError(
            f"{row_label} comment is {len(comment)} characters (max {MAX_COMMENT_LENGTH})"
        )
    return ActivityPost(
        id=_clean_id(row.get("id"), "id", row_label),
        venue_id=_clean_id(row.get("venue_id"), "venue_id", row_label),
        user_id=_clean_id(row.get("user_id"), "user_id", row_label),
        rating=_parse_rating(row, row_label),
        created_at=_parse_created_at(row.get("created_at"), row_label),
        comment=comment,
        photo_url=_clean_text(row.get("photo_url")),
        user_location=_parse_user_location(row, row_label),
    )


def _iter_records(rows: Iterable[Row] | pd.DataFrame, required: set[str]) -> Iterable[Row]:
    if isinstance(rows, pd.DataFrame):
        missing = required - set(rows.columns)
        if missing:
            raise PostRowError(
                f"Missing columns: {', '.join(sorted(missing))}. Present: {list(rows.columns)}"
            )
        return rows.to_dict("records")
    return rows


def posts_from_rows(rows: Iterable[Row] | pd.DataFrame) -> List[ActivityPost]:
    """Convert query results into posts, failing on the first bad row."""

    return [
        post_from_row(row, f"row {index}")
        for index, row in enumerate(_iter_records(rows, REQUIRED_POST_COLUMNS), start=1)
    ]


def venue_from_row(row: Row, row_label: str = "row") -> Venue:
    """Convert one ``venues`` row; venues without coordinates are rejected."""

    name = _clean_text(row.get("name")) or "Unknown Venue"
    lat = row.get("latitude")
    lon = row.get("longitude")
    if _is_blank(lat) or _is_blank(lon):
        raise PostRowError(f"{row_label} venue {name!r} has no coordinates")
    try:
        location = validate_point(
            GeoPoint(latitude=float(lat), longitude=float(lon)), f"venue {name!r}"
        )
    except (TypeError, ValueError) as exc:
        raise PostRowError(f"{row_label}: {exc}") from exc
    return Venue(id=_clean_id(row.get("id"), "id", row_label), name=name, location=location)


def venues_from_rows(rows: Iterable[Row] | pd.DataFrame) -> List[Venue]:
    return [
        venue_from_row(row, f"row {index}")
        for index, row in enumerate(_iter_records(rows, REQUIRED_VENUE_COLUMNS), start=1)
    ]
