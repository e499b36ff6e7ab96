"""Great-circle geometry on latitude/longitude coordinates."""

from __future__ import annotations

import math

from bus_tracker.geo.models import Coordinate

EARTH_RADIUS_KM = 6371.0  # mean Earth radius


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine great-circle distance between *a* and *b* in kilometres.

    Inputs are not range-checked; callers are expected to pass valid
    latitude/longitude values.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    h = min(1.0, h)  # rounding can push near-antipodal pairs just past 1
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Initial great-circle bearing from *a* towards *b*, in degrees [0, 360).

    0 = north, 90 = east.  Returns 0.0 for coincident points.
    """
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lng = math.radians(b.lng - a.lng)

    y = math.sin(d_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def interpolate(a: Coordinate, b: Coordinate, fraction: float) -> Coordinate:
    """Return the point *fraction* of the way from *a* to *b*.

    Plain linear interpolation in degrees; fine for the few-kilometre
    segments of a bus route.  *fraction* is clamped to [0, 1].
    """
    t = min(max(fraction, 0.0), 1.0)
    return Coordinate(
        lat=a.lat + (b.lat - a.lat) * t,
        lng=a.lng + (b.lng - a.lng) * t,
    )
