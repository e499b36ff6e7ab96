"""Tests for FixParser — payload validation and sanitising."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from bus_tracker.geo.models import Coordinate
from bus_tracker.tracking.models import FixSource
from bus_tracker.tracking.parser import (
    MAX_CLOCK_SKEW_S,
    FixParser,
    FixValidationError,
    parse_timestamp,
)

_NOW = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


def _parse(raw: dict, vehicle_id: str = "bus-1"):
    return FixParser().parse(vehicle_id, raw, received_at=_NOW)


# ---------------------------------------------------------------------------
# Valid payloads
# ---------------------------------------------------------------------------

def test_minimal_payload():
    fix = _parse({"lat": 28.9730, "lng": 77.6410})
    assert fix.vehicle_id == "bus-1"
    assert fix.coordinate == Coordinate(28.9730, 77.6410)
    assert fix.speed == 0.0
    assert fix.source is FixSource.DRIVER_GPS
    assert fix.captured_at == _NOW
    assert fix.accuracy_m is None
    assert fix.heading_deg is None


def test_full_payload():
    fix = _parse(
        {
            "lat": 28.9954,
            "lng": 77.6456,
            "speed": 12.5,
            "accuracy": 8,
            "heading": 45,
            "source": "background",
            "timestamp": "2026-03-02T07:59:30Z",
            "driver_name": "Rajesh Kumar",
        }
    )
    assert fix.speed == 12.5
    assert fix.accuracy_m == 8.0
    assert fix.heading_deg == 45.0
    assert fix.source is FixSource.BACKGROUND
    assert fix.captured_at == _NOW - timedelta(seconds=30)
    assert fix.driver_name == "Rajesh Kumar"


def test_numeric_strings_accepted():
    fix = _parse({"lat": "28.9730", "lng": "77.6410"})
    assert fix.coordinate == Coordinate(28.9730, 77.6410)


def test_camel_case_driver_name():
    assert _parse({"lat": 0, "lng": 0, "driverName": "Suresh"}).driver_name == "Suresh"


# ---------------------------------------------------------------------------
# Coordinate validation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw, field",
    [
        ({"lng": 77.0}, "lat"),
        ({"lat": 28.0}, "lng"),
        ({"lat": None, "lng": 77.0}, "lat"),
        ({"lat": "north", "lng": 77.0}, "lat"),
        ({"lat": 28.0, "lng": [77.0]}, "lng"),
        ({"lat": True, "lng": 77.0}, "lat"),
        ({"lat": float("nan"), "lng": 77.0}, "lat"),
        ({"lat": 28.0, "lng": "inf"}, "lng"),
        ({"lat": 90.5, "lng": 77.0}, "lat"),
        ({"lat": 28.0, "lng": -181.0}, "lng"),
    ],
)
def test_invalid_coordinate_names_field(raw, field):
    with pytest.raises(FixValidationError) as excinfo:
        _parse(raw)
    assert excinfo.value.field == field


def test_range_edges_accepted():
    fix = _parse({"lat": -90, "lng": 180})
    assert fix.coordinate == Coordinate(-90.0, 180.0)


def test_blank_vehicle_id_rejected():
    with pytest.raises(FixValidationError) as excinfo:
        _parse({"lat": 0, "lng": 0}, vehicle_id="  ")
    assert excinfo.value.field == "vehicle_id"


def test_non_mapping_body_rejected():
    with pytest.raises(FixValidationError) as excinfo:
        FixParser().parse("bus-1", [28.0, 77.0], received_at=_NOW)  # type: ignore[arg-type]
    assert excinfo.value.field == "body"


def test_validation_error_is_value_error():
    with pytest.raises(ValueError, match="lat"):
        _parse({"lng": 0})


# ---------------------------------------------------------------------------
# Optional field sanitising
# ---------------------------------------------------------------------------

def test_negative_speed_clamped_to_zero():
    assert _parse({"lat": 0, "lng": 0, "speed": -3.0}).speed == 0.0


def test_non_numeric_speed_defaults_to_zero():
    assert _parse({"lat": 0, "lng": 0, "speed": "fast"}).speed == 0.0


def test_heading_clamped_to_360():
    assert _parse({"lat": 0, "lng": 0, "heading": 400}).heading_deg == 360.0


def test_nan_accuracy_dropped():
    assert _parse({"lat": 0, "lng": 0, "accuracy": float("nan")}).accuracy_m is None


def test_unknown_source_maps_to_other():
    assert _parse({"lat": 0, "lng": 0, "source": "carrier-pigeon"}).source is FixSource.OTHER


def test_source_is_case_insensitive():
    assert _parse({"lat": 0, "lng": 0, "source": "FALLBACK"}).source is FixSource.FALLBACK


def test_unparseable_timestamp_falls_back_to_received_at():
    assert _parse({"lat": 0, "lng": 0, "timestamp": "yesterday"}).captured_at == _NOW


# ---------------------------------------------------------------------------
# parse_timestamp
# ---------------------------------------------------------------------------

def test_parse_timestamp_epoch_milliseconds():
    ms = int(_NOW.timestamp() * 1000)
    assert parse_timestamp(ms) == _NOW


def test_parse_timestamp_epoch_seconds():
    assert parse_timestamp(_NOW.timestamp()) == _NOW


def test_parse_timestamp_naive_is_utc():
    assert parse_timestamp("2026-03-02T08:00:00") == _NOW


def test_parse_timestamp_converts_offset_to_utc():
    assert parse_timestamp("2026-03-02T13:30:00+05:30") == _NOW


@pytest.mark.parametrize("value", [None, True, "", "garbage", float("nan"), object()])
def test_parse_timestamp_rejects(value):
    assert parse_timestamp(value) is None


# ---------------------------------------------------------------------------
# Device clock skew
# ---------------------------------------------------------------------------

def test_future_timestamp_falls_back_to_received_at():
    fix = _parse({"lat": 0, "lng": 0, "timestamp": "2027-01-01T00:00:00Z"})
    assert fix.captured_at == _NOW


def test_small_clock_skew_is_kept():
    ahead = _NOW + timedelta(seconds=MAX_CLOCK_SKEW_S)
    assert _parse({"lat": 0, "lng": 0, "timestamp": ahead.isoformat()}).captured_at == ahead


def test_skew_just_past_limit_falls_back():
    ahead = _NOW + timedelta(seconds=MAX_CLOCK_SKEW_S + 1)
    assert _parse({"lat": 0, "lng": 0, "timestamp": ahead.isoformat()}).captured_at == _NOW
