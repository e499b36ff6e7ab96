"""Shared fixtures for web tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from bus_tracker.routes.registry import RouteRegistry
from bus_tracker.tracking.store import FixStore
from bus_tracker.web.app import app, get_service
from bus_tracker.web.service import TrackingService

T0 = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when a test advances it."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(clock) -> TrackingService:
    """Service over the built-in routes with a controllable clock."""
    return TrackingService(RouteRegistry.default(), FixStore(clock=clock))


@pytest.fixture
def client(service):
    """FastAPI test client bound to the ``service`` fixture."""
    app.dependency_overrides[get_service] = lambda: service
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
