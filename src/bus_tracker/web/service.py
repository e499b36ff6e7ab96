"""TrackingService — the ingestion/query boundary used by the Web API."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bus_tracker.config import Settings
from bus_tracker.progress.checkpoints import SubmissionCheck, TripType, check_submission_point
from bus_tracker.progress.engine import RouteProgressEngine
from bus_tracker.routes.models import ROUTE_NOT_FOUND, Route, RouteNotFound
from bus_tracker.routes.registry import RouteRegistry
from bus_tracker.tracking.models import EnrichedFix, FixState
from bus_tracker.tracking.parser import FixParser
from bus_tracker.tracking.store import FixStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitAck:
    """Acknowledgement returned to the submitting driver client.

    ``accepted`` is False when the fix was older than the one already stored.
    """

    vehicle_id: str
    captured_at: datetime
    current_stop: str
    next_stop: str
    progress_percent: int
    status_label: str
    accepted: bool = True


@dataclass(frozen=True)
class CurrentFix:
    """A vehicle's current fix as seen by a polling client."""

    vehicle_id: str
    state: FixState
    fix: EnrichedFix | None
    age_minutes: float | None

    @property
    def is_fresh(self) -> bool:
        return self.state is FixState.FRESH

    @property
    def is_absent(self) -> bool:
        return self.state is FixState.ABSENT


class TrackingService:
    """Wires the route registry, progress engine, parser and fix store.

    Parameters
    ----------
    registry:
        Static route lookup.
    store:
        Shared fix store; its clock also timestamps incoming fixes.
    engine:
        Progress engine.  Defaults to the standard three-band engine.
    parser:
        Payload parser.  Defaults to :class:`FixParser`.
    """

    def __init__(
        self,
        registry: RouteRegistry,
        store: FixStore,
        engine: RouteProgressEngine | None = None,
        parser: FixParser | None = None,
    ) -> None:
        self._registry = registry
        self._store = store
        self._engine = engine if engine is not None else RouteProgressEngine()
        self._parser = parser if parser is not None else FixParser()
        self._unrouted: set[str] = set()
        self._unrouted_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, store: FixStore | None = None) -> TrackingService:
        """Build a service from :class:`Settings`."""
        if settings.routes_path:
            registry = RouteRegistry.from_json_file(settings.routes_path)
        else:
            registry = RouteRegistry.default()
        engine = RouteProgressEngine(
            at_stop_km=settings.at_stop_km,
            near_stop_km=settings.near_stop_km,
            mode=settings.progress_mode,
        )
        return cls(
            registry,
            store if store is not None else FixStore(freshness_window_s=settings.freshness_window_s),
            engine,
        )

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    @property
    def store(self) -> FixStore:
        return self._store

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def submit_fix(self, vehicle_id: str, raw: Mapping[str, Any]) -> SubmitAck:
        """Validate, enrich and store one fix.

        Raises
        ------
        FixValidationError
            If the payload's coordinate is missing, non-numeric or out of range.
        """
        fix = self._parser.parse(vehicle_id, raw, received_at=self._store.now())
        route = self._lookup_route(vehicle_id)
        progress = self._engine.compute(fix, route)

        enriched = EnrichedFix(
            fix=fix,
            progress=progress,
            received_at=fix.captured_at,  # replaced by the store on record
            bus_number=route.bus_number if route else "",
            route_name=route.route_name if route else "",
        )
        accepted = self._store.record(enriched)
        if accepted:
            _logger.info(
                "Fix for %s at (%.5f, %.5f): %s, %d%%",
                vehicle_id,
                fix.coordinate.lat,
                fix.coordinate.lng,
                progress.status_label,
                progress.progress_percent,
            )

        return SubmitAck(
            vehicle_id=vehicle_id,
            captured_at=fix.captured_at,
            current_stop=progress.nearest_waypoint_name,
            next_stop=progress.next_waypoint_name,
            progress_percent=progress.progress_percent,
            status_label=progress.status_label,
            accepted=accepted,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query_current(self, vehicle_id: str) -> CurrentFix:
        """Return the vehicle's last fix tagged fresh/stale with its age, or absent."""
        lookup = self._store.current(vehicle_id)
        age_minutes = None if lookup.age_seconds is None else lookup.age_seconds / 60.0
        return CurrentFix(
            vehicle_id=vehicle_id,
            state=lookup.state,
            fix=lookup.fix,
            age_minutes=age_minutes,
        )

    def query_all_active(self) -> list[EnrichedFix]:
        """Return every fix still inside the freshness window."""
        return self._store.all_active()

    def list_routes(self) -> list[Route]:
        return self._registry.routes()

    def route_for(self, vehicle_id: str) -> Route | RouteNotFound:
        return self._registry.route_for(vehicle_id)

    def check_submission(self, vehicle_id: str, trip_type: TripType | str) -> SubmissionCheck | None:
        """Check the vehicle's fresh position against its attendance checkpoint.

        Returns None when there is no fresh fix for the vehicle.

        Raises
        ------
        ValueError
            If *trip_type* is not a known trip type.
        """
        trip = TripType(trip_type)
        current = self.query_current(vehicle_id)
        if not current.is_fresh or current.fix is None:
            return None
        return check_submission_point(
            current.fix.fix.coordinate,
            self._registry.route_for(vehicle_id),
            trip,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lookup_route(self, vehicle_id: str) -> Route | RouteNotFound:
        route = self._registry.route_for(vehicle_id)
        if route is ROUTE_NOT_FOUND:
            with self._unrouted_lock:
                first_seen = vehicle_id not in self._unrouted
                self._unrouted.add(vehicle_id)
            if first_seen:
                _logger.warning("No route registered for vehicle %s; reporting unknown route", vehicle_id)
            else:
                _logger.debug("No route registered for vehicle %s", vehicle_id)
        return route
