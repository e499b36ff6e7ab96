"""Route progress: nearest-stop matching, progress percent, status labels."""

from bus_tracker.progress.checkpoints import SubmissionCheck, TripType, check_submission_point
from bus_tracker.progress.engine import RouteProgressEngine, nearest_waypoint
from bus_tracker.progress.models import (
    END_OF_ROUTE,
    ProgressMode,
    ProgressPhase,
    ProgressReport,
)

__all__ = [
    "END_OF_ROUTE",
    "ProgressMode",
    "ProgressPhase",
    "ProgressReport",
    "RouteProgressEngine",
    "SubmissionCheck",
    "TripType",
    "check_submission_point",
    "nearest_waypoint",
]
