"""Validate a route file and print a per-route summary.

Usage:
    uv run python scripts/check_routes.py                 # built-in catalog
    uv run python scripts/check_routes.py routes.json

Exits with status 1 if any route violates a route invariant.
"""

from __future__ import annotations

import argparse
import sys

from bus_tracker.geo.distance import distance_km
from bus_tracker.routes.models import RouteConfigError
from bus_tracker.routes.registry import RouteRegistry


def main() -> None:
    ap = argparse.ArgumentParser(description="Validate bus route definitions")
    ap.add_argument("path", nargs="?", default="", help="JSON route file (default: built-in catalog)")
    args = ap.parse_args()

    try:
        registry = RouteRegistry.from_json_file(args.path) if args.path else RouteRegistry.default()
    except (OSError, RouteConfigError) as exc:
        print(f"× Invalid route configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"{len(registry)} route(s) OK\n")
    for route in registry.routes():
        legs = [
            distance_km(a.coordinate, b.coordinate)
            for a, b in zip(route.waypoints, route.waypoints[1:])
        ]
        print(f"{route.vehicle_id}  {route.bus_number}  {route.route_name}")
        for wp, leg in zip(route.waypoints, [*legs, None]):
            suffix = f"  ↓ {leg:.2f} km" if leg is not None else ""
            print(f"    {wp.sequence_index:>2}. {wp.name:<28} ({wp.coordinate.lat:.4f}, {wp.coordinate.lng:.4f}){suffix}")
        print(f"    total {sum(legs):.2f} km\n")


if __name__ == "__main__":
    main()
