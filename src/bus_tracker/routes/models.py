"""Route data structures."""

from __future__ import annotations

from dataclasses import dataclass

from bus_tracker.geo.models import Coordinate


class RouteConfigError(ValueError):
    """Raised when a static route definition violates a route invariant."""


@dataclass(frozen=True)
class Waypoint:
    """A named stop on a route.

    ``sequence_index`` is the stop's position in travel order (0 = origin).
    """

    coordinate: Coordinate
    name: str
    sequence_index: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "lat": self.coordinate.lat,
            "lng": self.coordinate.lng,
            "sequence_index": self.sequence_index,
        }


@dataclass(frozen=True)
class Route:
    """The ordered list of stops a vehicle is expected to traverse.

    Validated on construction: at least two waypoints, every coordinate in
    range, non-blank names, and ``sequence_index`` equal to list position.
    """

    vehicle_id: str
    waypoints: tuple[Waypoint, ...]
    bus_number: str = ""
    route_name: str = ""
    driver_name: str = ""

    def __post_init__(self) -> None:
        if not self.vehicle_id or not self.vehicle_id.strip():
            raise RouteConfigError("Route vehicle_id must be a non-empty string")
        if len(self.waypoints) < 2:
            raise RouteConfigError(
                f"Route {self.vehicle_id!r} needs at least 2 waypoints, got {len(self.waypoints)}"
            )
        for pos, wp in enumerate(self.waypoints):
            if wp.sequence_index != pos:
                raise RouteConfigError(
                    f"Route {self.vehicle_id!r}: waypoint {wp.name!r} has "
                    f"sequence_index={wp.sequence_index}, expected {pos}"
                )
            if not wp.name or not wp.name.strip():
                raise RouteConfigError(f"Route {self.vehicle_id!r}: waypoint {pos} has no name")
            if not wp.coordinate.is_valid():
                raise RouteConfigError(
                    f"Route {self.vehicle_id!r}: waypoint {wp.name!r} has an "
                    f"out-of-range coordinate ({wp.coordinate.lat}, {wp.coordinate.lng})"
                )

    @property
    def origin(self) -> Waypoint:
        return self.waypoints[0]

    @property
    def terminus(self) -> Waypoint:
        return self.waypoints[-1]

    @property
    def last_index(self) -> int:
        return len(self.waypoints) - 1

    @classmethod
    def from_stops(
        cls,
        vehicle_id: str,
        stops: list[dict],
        bus_number: str = "",
        route_name: str = "",
        driver_name: str = "",
    ) -> Route:
        """Build a route from ``[{"name", "lat", "lng"}, ...]`` dicts in travel order.

        If the stops carry an ``order`` key they are sorted by it first.
        """
        waypoints: list[Waypoint] = []
        try:
            if any("order" in s for s in stops):
                stops = sorted(stops, key=lambda s: s.get("order", 0))
            for i, s in enumerate(stops):
                if not isinstance(s["name"], str):
                    raise RouteConfigError(
                        f"Route {vehicle_id!r}: waypoint {i} name must be a string, got {s['name']!r}"
                    )
                waypoints.append(
                    Waypoint(
                        coordinate=Coordinate(lat=float(s["lat"]), lng=float(s["lng"])),
                        name=s["name"],
                        sequence_index=i,
                    )
                )
        except RouteConfigError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RouteConfigError(f"Route {vehicle_id!r}: malformed stop entry ({exc})") from exc
        return cls(
            vehicle_id=vehicle_id,
            waypoints=tuple(waypoints),
            bus_number=bus_number,
            route_name=route_name,
            driver_name=driver_name,
        )

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "bus_number": self.bus_number,
            "route_name": self.route_name,
            "driver_name": self.driver_name,
            "stops": [wp.to_dict() for wp in self.waypoints],
        }


class RouteNotFound:
    """Lookup outcome for a vehicle with no registered route.

    A plain value, not an exception: use the :data:`ROUTE_NOT_FOUND`
    singleton and compare with ``is``.  It is falsy so ``if route:`` works.
    """

    _instance: RouteNotFound | None = None

    def __new__(cls) -> RouteNotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ROUTE_NOT_FOUND"


ROUTE_NOT_FOUND = RouteNotFound()
