"""Attendance submission checkpoints.

Students may only submit attendance once the bus is close to the stop that
ends their trip: the second-to-last stop on the way to campus, the last
stop on the way home.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bus_tracker.geo.distance import distance_km
from bus_tracker.geo.models import Coordinate
from bus_tracker.routes.models import Route, RouteNotFound, Waypoint

SUBMISSION_RADIUS_KM = 1.0
UNKNOWN_LOCATION = "Unknown Location"


class TripType(str, Enum):
    HOME_TO_CAMPUS = "home-to-campus"
    CAMPUS_TO_HOME = "campus-to-home"


@dataclass(frozen=True)
class SubmissionCheck:
    """Whether a position is inside the submission radius of the trip's checkpoint."""

    trip_type: TripType
    target_name: str
    distance_km: float | None
    within_range: bool

    def to_dict(self) -> dict:
        return {
            "trip_type": self.trip_type.value,
            "target_name": self.target_name,
            "distance_km": self.distance_km,
            "within_range": self.within_range,
        }


def checkpoint_for(route: Route, trip_type: TripType) -> Waypoint:
    """Return the stop at which attendance opens for *trip_type*."""
    if trip_type is TripType.HOME_TO_CAMPUS:
        return route.waypoints[-2]
    return route.waypoints[-1]


def check_submission_point(
    position: Coordinate,
    route: Route | RouteNotFound,
    trip_type: TripType | str,
    radius_km: float = SUBMISSION_RADIUS_KM,
) -> SubmissionCheck:
    """Check *position* against the checkpoint of *trip_type* on *route*.

    Raises:
        ValueError: if *trip_type* is not a known trip type.
    """
    trip = TripType(trip_type)
    if isinstance(route, RouteNotFound):
        return SubmissionCheck(trip, UNKNOWN_LOCATION, None, False)

    target = checkpoint_for(route, trip)
    d = distance_km(position, target.coordinate)
    return SubmissionCheck(trip, target.name, d, d <= radius_km)
