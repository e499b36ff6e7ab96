"""Replay a simulated drive along a route and print the computed progress.

Positions are interpolated between consecutive stops and fed through the
same ingestion path the Web API uses, with a simulated clock.

Usage:
    uv run python scripts/replay_route.py
    uv run python scripts/replay_route.py --vehicle 66d0123456a1b2c3d4e5f602 --steps 5
    uv run python scripts/replay_route.py --mode segment --interval 30
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from datetime import datetime, timedelta, timezone

from dotenv import load_dotenv

load_dotenv()

from bus_tracker.config import Settings  # noqa: E402
from bus_tracker.geo.distance import interpolate  # noqa: E402
from bus_tracker.progress.models import ProgressMode  # noqa: E402
from bus_tracker.routes.models import ROUTE_NOT_FOUND  # noqa: E402
from bus_tracker.tracking.store import FixStore  # noqa: E402
from bus_tracker.web.service import TrackingService  # noqa: E402


class _SimClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay a simulated drive along a bus route")
    ap.add_argument("--vehicle", default="66d0123456a1b2c3d4e5f601", help="Vehicle / route id")
    ap.add_argument("--steps", type=int, default=4, help="Samples per segment between stops")
    ap.add_argument("--interval", type=float, default=20.0, help="Simulated seconds between fixes")
    ap.add_argument("--mode", choices=[m.value for m in ProgressMode], default=None,
                    help="Progress mode (default: BUS_TRACKER_PROGRESS_MODE or waypoint)")
    args = ap.parse_args()

    settings = Settings.from_env()
    if args.mode:
        settings = dataclasses.replace(settings, progress_mode=ProgressMode(args.mode))

    clock = _SimClock(datetime.now(timezone.utc))
    store = FixStore(freshness_window_s=settings.freshness_window_s, clock=clock)
    svc = TrackingService.from_settings(settings, store=store)

    route = svc.route_for(args.vehicle)
    if route is ROUTE_NOT_FOUND:
        print(f"  [!] No route registered for {args.vehicle!r}", file=sys.stderr)
        print(f"      Known vehicles: {', '.join(svc.registry.vehicle_ids())}", file=sys.stderr)
        sys.exit(1)

    print(f"Route     : {route.route_name or route.vehicle_id} ({route.bus_number})")
    print(f"Stops     : {' → '.join(wp.name for wp in route.waypoints)}")
    print(f"Mode      : {settings.progress_mode.value}")
    print()
    print(f"{'time':>8} {'lat':>9} {'lng':>9} {'status':<28} {'next':<24} {'%':>4} {'next km':>8}")
    print("-" * 96)

    steps = max(1, args.steps)
    wps = route.waypoints
    for i in range(len(wps) - 1):
        for s in range(steps):
            pos = interpolate(wps[i].coordinate, wps[i + 1].coordinate, s / steps)
            _emit(svc, args.vehicle, pos, clock, args.interval)
    _emit(svc, args.vehicle, wps[-1].coordinate, clock, args.interval)


def _emit(svc: TrackingService, vehicle_id: str, pos, clock: _SimClock, interval: float) -> None:
    ack = svc.submit_fix(
        vehicle_id,
        {"lat": pos.lat, "lng": pos.lng, "timestamp": clock.now.isoformat(), "source": "driver_gps"},
    )
    current = svc.query_current(vehicle_id)
    report = current.fix.progress if current.fix else None
    next_km = report.distance_to_next_km if report else 0.0
    print(
        f"{clock.now:%H:%M:%S} {pos.lat:>9.4f} {pos.lng:>9.4f} "
        f"{ack.status_label:<28} {ack.next_stop:<24} {ack.progress_percent:>4d} {next_km:>8.2f}"
    )
    clock.now += timedelta(seconds=interval)


if __name__ == "__main__":
    main()
