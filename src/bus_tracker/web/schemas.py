"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class FixSubmission(BaseModel):
    """Raw fix payload from a driver client.

    Fields are deliberately loose: coordinate validation happens in
    :class:`~bus_tracker.tracking.parser.FixParser` so the error names the
    offending field.
    """

    lat: Any = None
    lng: Any = None
    speed: Any = None
    accuracy: Any = None
    heading: Any = None
    source: Any = None
    timestamp: Any = None
    driver_name: Any = None


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_s: float


class SubmitResponse(BaseModel):
    success: bool
    vehicle_id: str
    captured_at: str
    current_stop: str
    next_stop: str
    progress_percent: int
    status_label: str
    accepted: bool


class LocationRecord(BaseModel):
    vehicle_id: str
    lat: float
    lng: float
    speed: float
    accuracy_m: float | None = None
    heading_deg: float | None = None
    source: str
    driver_name: str | None = None
    captured_at: str
    received_at: str
    bus_number: str = ""
    route_name: str = ""
    nearest_waypoint_index: int
    nearest_waypoint_name: str
    distance_to_nearest_km: float
    status_label: str
    next_waypoint_name: str
    progress_percent: int
    distance_to_next_km: float
    phase: str
    bearing_to_next_deg: float | None = None


class CurrentLocationResponse(BaseModel):
    vehicle_id: str
    state: str
    is_fresh: bool
    age_minutes: float
    location: LocationRecord


class AllLocationsResponse(BaseModel):
    count: int
    locations: list[LocationRecord]


class RouteStop(BaseModel):
    name: str
    lat: float
    lng: float
    sequence_index: int


class RouteRecord(BaseModel):
    vehicle_id: str
    bus_number: str
    route_name: str
    driver_name: str
    stops: list[RouteStop]


class RoutesResponse(BaseModel):
    routes: list[RouteRecord]


class SubmissionCheckResponse(BaseModel):
    vehicle_id: str
    trip_type: str
    target_name: str
    distance_km: float | None
    within_range: bool
