"""Geographic primitives: coordinates, haversine distance, bearings."""

from bus_tracker.geo.distance import EARTH_RADIUS_KM, bearing_deg, distance_km, interpolate
from bus_tracker.geo.models import Coordinate

__all__ = ["EARTH_RADIUS_KM", "Coordinate", "bearing_deg", "distance_km", "interpolate"]
