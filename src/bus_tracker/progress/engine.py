"""RouteProgressEngine — nearest-stop matching and progress derivation.

Given a GPS fix and the vehicle's ordered stop list this decides:

  * which stop the vehicle is nearest to (first index wins on ties),
  * a status label banded by the distance to that stop,
  * the next stop and the distance to it,
  * progress along the route as a percentage of stops passed.

The engine never raises: unregistered vehicles get the unknown-route
report, and the terminus clamps "next stop" to ``End of Route``.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from bus_tracker.geo.distance import bearing_deg, distance_km
from bus_tracker.geo.models import Coordinate
from bus_tracker.progress.models import (
    END_OF_ROUTE,
    ProgressMode,
    ProgressPhase,
    ProgressReport,
)
from bus_tracker.routes.models import Route, RouteNotFound

if TYPE_CHECKING:
    from bus_tracker.tracking.models import Fix

_logger = logging.getLogger(__name__)

AT_STOP_KM = 0.3
NEAR_STOP_KM = 1.0
MAX_SEGMENT_CREDIT = 0.8  # SEGMENT mode never credits more than this share of a segment


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def nearest_waypoint(position: Coordinate, route: Route) -> tuple[int, float]:
    """Return ``(index, distance_km)`` of the stop closest to *position*.

    Stops are scanned in travel order and the best-so-far is only replaced
    on a strict improvement, so the lowest index wins a tie.
    """
    best_idx = 0
    best_dist = distance_km(position, route.waypoints[0].coordinate)
    for i in range(1, len(route.waypoints)):
        d = distance_km(position, route.waypoints[i].coordinate)
        if d < best_dist:
            best_idx = i
            best_dist = d
    return best_idx, best_dist


class RouteProgressEngine:
    """Computes :class:`ProgressReport` values for fixes.

    Args:
        at_stop_km: Within this distance of the nearest stop the label is
            ``"At <stop>"`` and the phase is ``arrived``.
        near_stop_km: Within this distance (and beyond ``at_stop_km``) the
            label is ``"Near <stop>"``; further away it is
            ``"Heading to <stop>"``.
        mode: Progress derivation, see :class:`ProgressMode`.
    """

    def __init__(
        self,
        at_stop_km: float = AT_STOP_KM,
        near_stop_km: float = NEAR_STOP_KM,
        mode: ProgressMode = ProgressMode.WAYPOINT,
    ) -> None:
        if at_stop_km < 0 or near_stop_km < at_stop_km:
            raise ValueError(
                f"Need 0 <= at_stop_km <= near_stop_km, got {at_stop_km} / {near_stop_km}"
            )
        self.at_stop_km = at_stop_km
        self.near_stop_km = near_stop_km
        self.mode = mode

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compute(self, fix: Fix, route: Route | RouteNotFound) -> ProgressReport:
        """Progress of *fix* along *route*."""
        return self.compute_at(fix.coordinate, route)

    def compute_at(self, position: Coordinate, route: Route | RouteNotFound) -> ProgressReport:
        """Progress of a bare *position* along *route*."""
        if isinstance(route, RouteNotFound):
            return ProgressReport.unknown_route()

        idx, d_nearest = nearest_waypoint(position, route)
        nearest = route.waypoints[idx]
        at_terminus = idx == route.last_index

        if at_terminus:
            next_name = END_OF_ROUTE
            d_next = 0.0
            bearing = None
        else:
            following = route.waypoints[idx + 1]
            next_name = following.name
            d_next = distance_km(position, following.coordinate)
            bearing = bearing_deg(position, following.coordinate)

        report = ProgressReport(
            nearest_waypoint_index=idx,
            distance_to_nearest_km=d_nearest,
            status_label=self.status_label(nearest.name, d_nearest),
            next_waypoint_name=next_name,
            progress_percent=self._progress_percent(route, idx, d_nearest),
            distance_to_next_km=d_next,
            nearest_waypoint_name=nearest.name,
            phase=self._phase(d_nearest, d_next, at_terminus),
            bearing_to_next_deg=bearing,
        )
        _logger.debug(
            "Route %s: nearest=%s (%.3f km) next=%s progress=%d%%",
            route.vehicle_id,
            nearest.name,
            d_nearest,
            next_name,
            report.progress_percent,
        )
        return report

    def status_label(self, stop_name: str, distance: float) -> str:
        """Three-band label for a vehicle *distance* km from *stop_name*."""
        if distance <= self.at_stop_km:
            return f"At {stop_name}"
        if distance <= self.near_stop_km:
            return f"Near {stop_name}"
        return f"Heading to {stop_name}"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _progress_percent(self, route: Route, idx: int, d_nearest: float) -> int:
        position = float(idx)
        if (
            self.mode is ProgressMode.SEGMENT
            and idx < route.last_index
            and d_nearest > self.at_stop_km
        ):
            segment = distance_km(
                route.waypoints[idx].coordinate,
                route.waypoints[idx + 1].coordinate,
            )
            if segment > 0:
                position += min(MAX_SEGMENT_CREDIT, d_nearest / segment)

        pct = _round_half_up(position / route.last_index * 100)
        return max(0, min(100, pct))

    def _phase(self, d_nearest: float, d_next: float, at_terminus: bool) -> ProgressPhase:
        if d_nearest <= self.at_stop_km:
            return ProgressPhase.ARRIVED
        if at_terminus:
            return ProgressPhase.NEAR_FINAL
        if d_next <= self.near_stop_km:
            return ProgressPhase.APPROACHING
        return ProgressPhase.MOVING
