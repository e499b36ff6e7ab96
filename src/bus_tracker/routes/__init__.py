"""Static route configuration.

Public API
----------
Waypoint          - a named stop in travel order
Route             - the ordered stop list for one vehicle
RouteRegistry     - vehicle_id → Route lookup
ROUTE_NOT_FOUND   - lookup outcome for unregistered vehicles
RouteConfigError  - raised on invalid route definitions
"""

from bus_tracker.routes.models import (
    ROUTE_NOT_FOUND,
    Route,
    RouteConfigError,
    RouteNotFound,
    Waypoint,
)
from bus_tracker.routes.registry import RouteRegistry

__all__ = [
    "ROUTE_NOT_FOUND",
    "Route",
    "RouteConfigError",
    "RouteNotFound",
    "RouteRegistry",
    "Waypoint",
]
