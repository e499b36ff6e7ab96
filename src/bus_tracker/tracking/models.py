"""Location-tracking data models."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from bus_tracker.geo.models import Coordinate
from bus_tracker.progress.models import ProgressReport


class FixSource(str, Enum):
    """Where a fix came from."""

    DRIVER_GPS = "driver_gps"
    BACKGROUND = "background"
    FALLBACK = "fallback"
    CAMPUS_DEFAULT = "campus_default"
    OTHER = "other"


class FixState(str, Enum):
    """Freshness of a vehicle's slot in the fix store."""

    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True)
class Fix:
    """A single raw GPS observation for one vehicle."""

    vehicle_id: str
    coordinate: Coordinate
    captured_at: datetime
    """When the device took the fix (timezone-aware UTC)."""

    speed: float = 0.0
    """Ground speed as reported by the device. Clamped to >= 0."""

    source: FixSource = FixSource.DRIVER_GPS
    accuracy_m: float | None = None
    heading_deg: float | None = None
    driver_name: str | None = None


@dataclass(frozen=True)
class EnrichedFix:
    """A fix with its progress report and storage metadata attached.

    This is what the fix store holds: one per vehicle, last write wins.
    """

    fix: Fix
    progress: ProgressReport
    received_at: datetime
    bus_number: str = ""
    route_name: str = ""

    @property
    def vehicle_id(self) -> str:
        return self.fix.vehicle_id

    @property
    def captured_at(self) -> datetime:
        return self.fix.captured_at

    def to_dict(self) -> dict:
        """Flat, JSON-serializable view used by the HTTP layer."""
        fix = self.fix
        progress = dataclasses.asdict(self.progress)
        progress["phase"] = self.progress.phase.value
        return {
            "vehicle_id": fix.vehicle_id,
            "lat": fix.coordinate.lat,
            "lng": fix.coordinate.lng,
            "speed": fix.speed,
            "accuracy_m": fix.accuracy_m,
            "heading_deg": fix.heading_deg,
            "source": fix.source.value,
            "driver_name": fix.driver_name,
            "captured_at": fix.captured_at.isoformat(),
            "received_at": self.received_at.isoformat(),
            "bus_number": self.bus_number,
            "route_name": self.route_name,
            **progress,
        }


@dataclass(frozen=True)
class FixLookup:
    """Result of asking the store for one vehicle's current fix.

    ``fix`` and ``age_seconds`` are None only when ``state`` is ABSENT.
    """

    vehicle_id: str
    state: FixState
    fix: EnrichedFix | None = None
    age_seconds: float | None = None

    @property
    def is_fresh(self) -> bool:
        return self.state is FixState.FRESH
