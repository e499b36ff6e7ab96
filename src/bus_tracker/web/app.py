"""FastAPI Web application — live bus locations and route progress."""

from __future__ import annotations

import time
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from bus_tracker.config import Settings
from bus_tracker.routes.models import ROUTE_NOT_FOUND
from bus_tracker.tracking.models import EnrichedFix
from bus_tracker.tracking.parser import FixValidationError
from bus_tracker.web.schemas import (
    AllLocationsResponse,
    CurrentLocationResponse,
    FixSubmission,
    HealthResponse,
    LocationRecord,
    RouteRecord,
    RoutesResponse,
    SubmissionCheckResponse,
    SubmitResponse,
)
from bus_tracker.web.service import TrackingService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

_HERE = Path(__file__).parent
_VERSION = "0.1.0"
_STARTED = time.monotonic()

app = FastAPI(title="College Bus Tracker", version=_VERSION)

templates = Jinja2Templates(directory=str(_HERE / "templates"))

_service: TrackingService | None = None


def get_service() -> TrackingService:
    """Process-wide service, built from the environment on first use."""
    global _service
    if _service is None:
        _service = TrackingService.from_settings(Settings.from_env())
    return _service


def _record(enriched: EnrichedFix) -> LocationRecord:
    return LocationRecord(**enriched.to_dict())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/")
def index():
    return RedirectResponse(url="/board")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=_VERSION,
        uptime_s=round(time.monotonic() - _STARTED, 3),
    )


@app.post("/api/location/update-location/{vehicle_id}", response_model=SubmitResponse)
def update_location(
    vehicle_id: str,
    body: FixSubmission,
    svc: TrackingService = Depends(get_service),
) -> SubmitResponse:
    """Ingest one driver fix and return its computed progress."""
    try:
        ack = svc.submit_fix(vehicle_id, body.model_dump())
    except FixValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail={"field": exc.field, "message": exc.message},
        ) from exc

    return SubmitResponse(
        success=True,
        vehicle_id=ack.vehicle_id,
        captured_at=ack.captured_at.isoformat(),
        current_stop=ack.current_stop,
        next_stop=ack.next_stop,
        progress_percent=ack.progress_percent,
        status_label=ack.status_label,
        accepted=ack.accepted,
    )


@app.get("/api/location/current-location/{vehicle_id}", response_model=CurrentLocationResponse)
def current_location(
    vehicle_id: str,
    svc: TrackingService = Depends(get_service),
) -> CurrentLocationResponse:
    """Return the vehicle's last fix, tagged fresh or stale with its age."""
    current = svc.query_current(vehicle_id)
    if current.fix is None or current.age_minutes is None:
        raise HTTPException(
            status_code=404,
            detail=f"No location data for vehicle {vehicle_id}",
        )

    return CurrentLocationResponse(
        vehicle_id=vehicle_id,
        state=current.state.value,
        is_fresh=current.is_fresh,
        age_minutes=round(current.age_minutes, 2),
        location=_record(current.fix),
    )


@app.get("/api/location/all-locations", response_model=AllLocationsResponse)
def all_locations(svc: TrackingService = Depends(get_service)) -> AllLocationsResponse:
    """Return every fix received within the freshness window."""
    locations = [_record(e) for e in svc.query_all_active()]
    return AllLocationsResponse(count=len(locations), locations=locations)


@app.get(
    "/api/location/submission-check/{vehicle_id}",
    response_model=SubmissionCheckResponse,
)
def submission_check(
    vehicle_id: str,
    trip_type: str,
    svc: TrackingService = Depends(get_service),
) -> SubmissionCheckResponse:
    """Is the bus close enough to the trip's checkpoint to open attendance?"""
    try:
        check = svc.check_submission(vehicle_id, trip_type)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Unknown trip_type {trip_type!r}") from exc
    if check is None:
        raise HTTPException(
            status_code=404,
            detail=f"No fresh location for vehicle {vehicle_id}",
        )

    return SubmissionCheckResponse(vehicle_id=vehicle_id, **check.to_dict())


@app.get("/api/routes", response_model=RoutesResponse)
def list_routes(svc: TrackingService = Depends(get_service)) -> RoutesResponse:
    return RoutesResponse(routes=[RouteRecord(**r.to_dict()) for r in svc.list_routes()])


@app.get("/api/routes/{vehicle_id}", response_model=RouteRecord)
def get_route(vehicle_id: str, svc: TrackingService = Depends(get_service)) -> RouteRecord:
    route = svc.route_for(vehicle_id)
    if route is ROUTE_NOT_FOUND:
        raise HTTPException(status_code=404, detail="Bus route not found")
    return RouteRecord(**route.to_dict())


@app.get("/board", response_class=HTMLResponse)
def board_page(request: Request, svc: TrackingService = Depends(get_service)) -> HTMLResponse:
    """Render the live board: one row per route with its latest progress."""
    rows = []
    for route in svc.list_routes():
        current = svc.query_current(route.vehicle_id)
        progress = current.fix.progress if current.fix else None
        rows.append(
            {
                "vehicle_id": route.vehicle_id,
                "bus_number": route.bus_number or route.vehicle_id,
                "route_name": route.route_name,
                "state": current.state.value,
                "age_minutes": current.age_minutes,
                "status_label": progress.status_label if progress else "Waiting for driver",
                "next_stop": progress.next_waypoint_name if progress else "",
                "progress_percent": progress.progress_percent if progress else 0,
                "stops": [wp.name for wp in route.waypoints],
                "nearest_index": progress.nearest_waypoint_index if progress else -1,
            }
        )

    return templates.TemplateResponse(
        request,
        "board.html",
        {
            "rows": rows,
            "freshness_minutes": svc.store.freshness_window_s / 60.0,
        },
    )
