"""FixParser — converts a raw client payload into a validated :class:`Fix`."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from bus_tracker.geo.models import LAT_RANGE, LNG_RANGE, Coordinate
from bus_tracker.tracking.models import Fix, FixSource

_MS_EPOCH_CUTOFF = 1e11  # numeric timestamps above this are milliseconds
MAX_CLOCK_SKEW_S = 60.0  # device clocks may run this far ahead of the server

# payload key → (range lo, range hi).  Coordinates are required and rejected
# when malformed; everything else is optional and sanitised.
_COORD_FIELDS: tuple[tuple[str, tuple[float, float]], ...] = (
    ("lat", LAT_RANGE),
    ("lng", LNG_RANGE),
)

# payload key → (Fix field, clamp_min, clamp_max).  None means no bound.
_OPTIONAL_FIELDS: tuple[tuple[str, str, float | None, float | None], ...] = (
    # raw_key    fix_field       min    max
    ("speed",    "speed",        0.0,   None),
    ("accuracy", "accuracy_m",   0.0,   None),
    ("heading",  "heading_deg",  0.0,   360.0),
)


class FixValidationError(ValueError):
    """A submitted fix is malformed.

    Attributes:
        field: Name of the offending payload field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _as_float(value: Any) -> float | None:
    """Return *value* as a finite float, or None if it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _sanitize(value: float, lo: float | None, hi: float | None) -> float:
    if lo is not None and value < lo:
        value = lo
    if hi is not None and value > hi:
        value = hi
    return value


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch seconds/milliseconds into aware UTC.

    Returns None when *value* is missing or unparseable.  Naive datetimes
    are taken to be UTC.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        seconds = value / 1000.0 if value > _MS_EPOCH_CUTOFF else float(value)
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class FixParser:
    """Parses a driver client's payload into a :class:`Fix`.

    The payload uses the wire names ``lat``, ``lng``, ``speed``,
    ``accuracy``, ``heading``, ``source``, ``timestamp`` and
    ``driver_name``.  A missing, non-numeric or out-of-range coordinate
    raises :class:`FixValidationError`; optional fields are clamped or
    dropped instead.
    """

    def parse(self, vehicle_id: str, raw: Mapping[str, Any], received_at: datetime) -> Fix:
        """Validate *raw* and return a :class:`Fix` for *vehicle_id*.

        ``received_at`` stands in for the capture time when the payload has
        no usable ``timestamp`` or one more than :data:`MAX_CLOCK_SKEW_S`
        in the future.
        """
        if not isinstance(vehicle_id, str) or not vehicle_id.strip():
            raise FixValidationError("vehicle_id", "must be a non-empty string")
        if not isinstance(raw, Mapping):
            raise FixValidationError("body", "must be a JSON object")

        coords: dict[str, float] = {}
        for key, (lo, hi) in _COORD_FIELDS:
            if raw.get(key) is None:
                raise FixValidationError(key, "is required")
            val = _as_float(raw[key])
            if val is None:
                raise FixValidationError(key, f"must be a finite number, got {raw[key]!r}")
            if not lo <= val <= hi:
                raise FixValidationError(key, f"must be within [{lo:g}, {hi:g}], got {val:g}")
            coords[key] = val

        kwargs: dict[str, Any] = {}
        for raw_key, fix_field, lo, hi in _OPTIONAL_FIELDS:
            val = _as_float(raw.get(raw_key))
            if val is not None:
                kwargs[fix_field] = _sanitize(val, lo, hi)

        driver = raw.get("driver_name") or raw.get("driverName")

        captured_at = parse_timestamp(raw.get("timestamp"))
        if captured_at is None or captured_at > received_at + timedelta(seconds=MAX_CLOCK_SKEW_S):
            captured_at = received_at

        return Fix(
            vehicle_id=vehicle_id,
            coordinate=Coordinate(lat=coords["lat"], lng=coords["lng"]),
            captured_at=captured_at,
            source=self._source(raw.get("source")),
            driver_name=str(driver) if driver else None,
            **kwargs,
        )

    @staticmethod
    def _source(value: Any) -> FixSource:
        if value is None:
            return FixSource.DRIVER_GPS
        try:
            return FixSource(str(value).strip().lower())
        except ValueError:
            return FixSource.OTHER
