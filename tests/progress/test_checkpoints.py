"""Tests for attendance submission checkpoints."""

from __future__ import annotations

import pytest

from bus_tracker.geo.models import Coordinate
from bus_tracker.progress.checkpoints import (
    SubmissionCheck,
    TripType,
    check_submission_point,
    checkpoint_for,
)
from bus_tracker.routes.models import ROUTE_NOT_FOUND
from bus_tracker.routes.registry import RouteRegistry

BUS_601 = "66d0123456a1b2c3d4e5f601"
CANTT = Coordinate(28.9938, 77.6822)
MODIPURAM = Coordinate(29.0661, 77.7104)
MIET = Coordinate(28.9730, 77.6410)


@pytest.fixture
def route():
    return RouteRegistry.default().route_for(BUS_601)


def test_home_to_campus_checkpoint_is_second_to_last_stop(route):
    assert checkpoint_for(route, TripType.HOME_TO_CAMPUS).name == "Meerut Cantt"


def test_campus_to_home_checkpoint_is_last_stop(route):
    assert checkpoint_for(route, TripType.CAMPUS_TO_HOME).name == "modipuram"


def test_within_range_at_checkpoint(route):
    check = check_submission_point(CANTT, route, "home-to-campus")
    assert check.target_name == "Meerut Cantt"
    assert check.distance_km == 0.0
    assert check.within_range is True


def test_out_of_range_far_from_checkpoint(route):
    check = check_submission_point(MIET, route, TripType.CAMPUS_TO_HOME)
    assert check.target_name == "modipuram"
    assert check.distance_km > 1.0
    assert check.within_range is False


def test_custom_radius(route):
    near = Coordinate(MODIPURAM.lat + 0.01, MODIPURAM.lng)  # ~1.1 km north
    assert check_submission_point(near, route, "campus-to-home").within_range is False
    assert check_submission_point(near, route, "campus-to-home", radius_km=2.0).within_range is True


def test_unknown_route():
    check = check_submission_point(MIET, ROUTE_NOT_FOUND, "home-to-campus")
    assert check == SubmissionCheck(TripType.HOME_TO_CAMPUS, "Unknown Location", None, False)


def test_unknown_trip_type_rejected(route):
    with pytest.raises(ValueError):
        check_submission_point(MIET, route, "campus-to-mars")


def test_to_dict(route):
    d = check_submission_point(CANTT, route, "home-to-campus").to_dict()
    assert d == {
        "trip_type": "home-to-campus",
        "target_name": "Meerut Cantt",
        "distance_km": 0.0,
        "within_range": True,
    }
