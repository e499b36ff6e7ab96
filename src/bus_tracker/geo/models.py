"""Geographic value types."""

from __future__ import annotations

import math
from dataclasses import dataclass

LAT_RANGE = (-90.0, 90.0)
LNG_RANGE = (-180.0, 180.0)


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 position in decimal degrees."""

    lat: float
    """Latitude [-90, 90]."""

    lng: float
    """Longitude [-180, 180]."""

    def is_valid(self) -> bool:
        """Return True if both components are finite and within range."""
        return (
            math.isfinite(self.lat)
            and math.isfinite(self.lng)
            and LAT_RANGE[0] <= self.lat <= LAT_RANGE[1]
            and LNG_RANGE[0] <= self.lng <= LNG_RANGE[1]
        )

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}
