"""Built-in route catalog, used when no route file is configured."""

from __future__ import annotations

# vehicle_id → route definition.  Stops are listed in travel order.
DEFAULT_ROUTES: dict[str, dict] = {
    "66d0123456a1b2c3d4e5f601": {
        "bus_number": "BUS-101",
        "route_name": "MIET to Muzaffarnagar",
        "driver_name": "Rajesh Kumar",
        "stops": [
            {"name": "MIET Campus", "lat": 28.9730, "lng": 77.6410},
            {"name": "rohta bypass", "lat": 28.9954, "lng": 77.6456},
            {"name": "Meerut Cantt", "lat": 28.9938, "lng": 77.6822},
            {"name": "modipuram", "lat": 29.0661, "lng": 77.7104},
        ],
    },
    "66d0123456a1b2c3d4e5f602": {
        "bus_number": "BUS-102",
        "route_name": "MIET to Delhi",
        "driver_name": "Suresh Singh",
        "stops": [
            {"name": "MIET Campus, Meerut", "lat": 28.9730, "lng": 77.6410},
            {"name": "Meerut Cantt", "lat": 28.9938, "lng": 77.6822},
            {"name": "Ghaziabad", "lat": 28.6692, "lng": 77.4538},
            {"name": "Delhi Border", "lat": 28.6100, "lng": 77.2300},
            {"name": "ISBT Anand Vihar", "lat": 28.6477, "lng": 77.3145},
            {"name": "Connaught Place, Delhi", "lat": 28.6304, "lng": 77.2177},
        ],
    },
}
