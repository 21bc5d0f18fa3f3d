"""General utility helpers shared across modules."""

from __future__ import annotations

import json
import math
import numbers
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

from .errors import InputError


def to_utc_aware(dt: datetime) -> datetime:
    """Return ``dt`` as a UTC-aware datetime; naive values are taken as UTC."""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(raw: str) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed) or return ``None``."""

    candidate = raw.strip()
    if not candidate:
        return None
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def seconds_between(earlier: datetime, later: datetime) -> float:
    """Signed seconds from ``earlier`` to ``later`` after UTC normalisation."""

    return (to_utc_aware(later) - to_utc_aware(earlier)).total_seconds()


def round_half_up(value: Decimal | float | int, places: int = 0) -> Decimal:
    """Round half away from zero at ``places`` decimals.

    Floats go through ``repr`` so that 2.5 rounds to 3 rather than being
    subject to banker's rounding or binary representation error.
    """

    if not isinstance(value, Decimal):
        if isinstance(value, numbers.Integral):
            value = Decimal(int(value))
        else:
            value = Decimal(repr(float(value)))
    exponent = Decimal(1).scaleb(-places)
    # The default 28-digit context cannot hold large values at ``places``.
    context = Context(prec=max(28, value.adjusted() + places + 2))
    return value.quantize(exponent, rounding=ROUND_HALF_UP, context=context)


def require_finite(value: Any, name: str) -> float:
    """Return ``value`` as a float or raise :class:`InputError`."""

    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        raise InputError(f"{name} must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InputError(f"{name} must be finite, got {value!r}")
    return number


def _normalise_value(value: Any) -> Any:
    """Convert objects to JSON-friendly representations."""

    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, set):
        return sorted(_normalise_value(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_normalise_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _normalise_value(val) for key, val in value.items()}
    return value


def json_dumps_sorted(value: Any) -> str:
    """Return canonical JSON for response bodies and comparisons."""

    normalised = _normalise_value(value)
    return json.dumps(normalised, sort_keys=True, separators=(",", ":"))
