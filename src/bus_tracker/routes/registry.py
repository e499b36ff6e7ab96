"""RouteRegistry — static vehicle_id → Route lookup, validated at load time."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from bus_tracker.routes.catalog import DEFAULT_ROUTES
from bus_tracker.routes.models import ROUTE_NOT_FOUND, Route, RouteConfigError, RouteNotFound

_logger = logging.getLogger(__name__)


class RouteRegistry:
    """Holds the routes loaded at process start.

    Routes are never mutated at runtime.  Unknown vehicles resolve to
    :data:`~bus_tracker.routes.models.ROUTE_NOT_FOUND` rather than raising.

    Parameters
    ----------
    routes:
        The routes to register.  Duplicate ``vehicle_id`` values raise
        :class:`RouteConfigError`.
    """

    def __init__(self, routes: Iterable[Route] = ()) -> None:
        self._routes: dict[str, Route] = {}
        for route in routes:
            if route.vehicle_id in self._routes:
                raise RouteConfigError(f"Duplicate route for vehicle {route.vehicle_id!r}")
            self._routes[route.vehicle_id] = route

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: dict) -> RouteRegistry:
        """Build a registry from ``{vehicle_id: {"stops": [...], ...}}``."""
        if not isinstance(data, dict):
            raise RouteConfigError("Route definitions must be a mapping of vehicle_id → route")
        routes = []
        for vehicle_id, entry in data.items():
            if not isinstance(entry, dict) or not isinstance(entry.get("stops"), list):
                raise RouteConfigError(f"Route {vehicle_id!r} has no 'stops' list")
            routes.append(
                Route.from_stops(
                    vehicle_id,
                    entry["stops"],
                    bus_number=str(entry.get("bus_number", "")),
                    route_name=str(entry.get("route_name", "")),
                    driver_name=str(entry.get("driver_name", "")),
                )
            )
        return cls(routes)

    @classmethod
    def from_json_file(cls, path: str | Path) -> RouteRegistry:
        """Load routes from a JSON file shaped like :data:`DEFAULT_ROUTES`."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except UnicodeDecodeError as exc:
            raise RouteConfigError(f"Route file {str(path)!r} is not UTF-8 text: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise RouteConfigError(f"Route file {str(path)!r} is not valid JSON: {exc}") from exc
        registry = cls.from_mapping(data)
        _logger.info("Loaded %d route(s) from %s", len(registry), path)
        return registry

    @classmethod
    def default(cls) -> RouteRegistry:
        """Registry populated from the built-in catalog."""
        return cls.from_mapping(DEFAULT_ROUTES)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def route_for(self, vehicle_id: str) -> Route | RouteNotFound:
        """Return the route registered for *vehicle_id*, or ``ROUTE_NOT_FOUND``."""
        return self._routes.get(vehicle_id, ROUTE_NOT_FOUND)

    def vehicle_ids(self) -> list[str]:
        return list(self._routes)

    def routes(self) -> list[Route]:
        return list(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._routes
