"""Route-progress data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

END_OF_ROUTE = "End of Route"
UNKNOWN_ROUTE_LABEL = "Unknown Route"
NOT_APPLICABLE = "N/A"


class ProgressPhase(str, Enum):
    """Coarse movement status relative to the nearest and next stops."""

    ARRIVED = "arrived"
    APPROACHING = "approaching"
    MOVING = "moving"
    NEAR_FINAL = "near_final"
    UNKNOWN = "unknown"


class ProgressMode(str, Enum):
    """How ``progress_percent`` is derived.

    ``WAYPOINT`` reports the nearest stop's index as a fraction of the route.
    ``SEGMENT`` additionally credits part of the segment towards the next
    stop when the vehicle is between stops.
    """

    WAYPOINT = "waypoint"
    SEGMENT = "segment"


@dataclass(frozen=True)
class ProgressReport:
    """Where a fix sits along its vehicle's route.

    Never persisted on its own; always attached to a fix before storage.
    """

    nearest_waypoint_index: int
    """Index of the nearest stop, or -1 when the vehicle has no route."""

    distance_to_nearest_km: float
    status_label: str
    """``"At X"``, ``"Near X"`` or ``"Heading to X"`` for the nearest stop X."""

    next_waypoint_name: str
    """Name of the stop after the nearest one, or ``"End of Route"``."""

    progress_percent: int
    """Route progress in [0, 100]."""

    distance_to_next_km: float
    nearest_waypoint_name: str = NOT_APPLICABLE
    phase: ProgressPhase = ProgressPhase.UNKNOWN
    bearing_to_next_deg: float | None = None

    @property
    def is_unknown_route(self) -> bool:
        return self.nearest_waypoint_index < 0

    @classmethod
    def unknown_route(cls) -> ProgressReport:
        """The uninformative-but-valid report for an unregistered vehicle."""
        return cls(
            nearest_waypoint_index=-1,
            distance_to_nearest_km=0.0,
            status_label=UNKNOWN_ROUTE_LABEL,
            next_waypoint_name=NOT_APPLICABLE,
            progress_percent=0,
            distance_to_next_km=0.0,
        )
