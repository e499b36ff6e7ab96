"""Location ingestion and query endpoints."""

from __future__ import annotations

BUS_601 = "66d0123456a1b2c3d4e5f601"
BUS_602 = "66d0123456a1b2c3d4e5f602"

MIET = {"lat": 28.9730, "lng": 77.6410}
ROHTA = {"lat": 28.9954, "lng": 77.6456}
CANTT = {"lat": 28.9938, "lng": 77.6822}


def _update(client, vehicle_id, body):
    return client.post(f"/api/location/update-location/{vehicle_id}", json=body)


# ---------------------------------------------------------------------------
# POST update-location
# ---------------------------------------------------------------------------

def test_update_location_returns_progress(client):
    resp = _update(client, BUS_601, {**ROHTA, "speed": 30})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["accepted"] is True
    assert data["vehicle_id"] == BUS_601
    assert data["current_stop"] == "rohta bypass"
    assert data["next_stop"] == "Meerut Cantt"
    assert data["status_label"] == "At rohta bypass"
    assert data["progress_percent"] == 33
    assert data["captured_at"] == "2026-03-02T08:00:00+00:00"


def test_update_location_missing_lat_is_422(client):
    resp = _update(client, BUS_601, {"lng": 77.6})
    assert resp.status_code == 422
    assert resp.json()["detail"]["field"] == "lat"


def test_update_location_out_of_range_is_422(client):
    resp = _update(client, BUS_601, {"lat": 28.9, "lng": 200})
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["field"] == "lng"
    assert "within" in detail["message"]


def test_update_location_bad_payload_not_stored(client):
    _update(client, BUS_601, {"lat": "abc", "lng": 77.6})
    assert client.get(f"/api/location/current-location/{BUS_601}").status_code == 404


def test_update_location_unknown_vehicle(client):
    resp = _update(client, "ghost-bus", MIET)
    assert resp.status_code == 200
    data = resp.json()
    assert data["status_label"] == "Unknown Route"
    assert data["next_stop"] == "N/A"
    assert data["progress_percent"] == 0


def test_update_location_out_of_order_not_accepted(client):
    _update(client, BUS_601, {**CANTT, "timestamp": "2026-03-02T08:00:00Z"})
    resp = _update(client, BUS_601, {**MIET, "timestamp": "2026-03-02T07:55:00Z"})
    assert resp.status_code == 200
    assert resp.json()["accepted"] is False
    location = client.get(f"/api/location/current-location/{BUS_601}").json()["location"]
    assert location["nearest_waypoint_name"] == "Meerut Cantt"


# ---------------------------------------------------------------------------
# GET current-location
# ---------------------------------------------------------------------------

def test_current_location_never_reported_is_404(client):
    resp = client.get(f"/api/location/current-location/{BUS_601}")
    assert resp.status_code == 404


def test_current_location_fresh(client, clock):
    _update(client, BUS_601, {**ROHTA, "driver_name": "Rajesh Kumar"})
    clock.advance(minutes=4)
    resp = client.get(f"/api/location/current-location/{BUS_601}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["state"] == "fresh"
    assert data["is_fresh"] is True
    assert data["age_minutes"] == 4.0
    loc = data["location"]
    assert loc["lat"] == ROHTA["lat"]
    assert loc["bus_number"] == "BUS-101"
    assert loc["route_name"] == "MIET to Muzaffarnagar"
    assert loc["driver_name"] == "Rajesh Kumar"
    assert loc["source"] == "driver_gps"
    assert loc["progress_percent"] == 33


def test_current_location_stale_keeps_data(client, clock):
    _update(client, BUS_601, ROHTA)
    clock.advance(minutes=6)
    data = client.get(f"/api/location/current-location/{BUS_601}").json()
    assert data["state"] == "stale"
    assert data["is_fresh"] is False
    assert data["age_minutes"] == 6.0
    assert data["location"]["nearest_waypoint_name"] == "rohta bypass"


# ---------------------------------------------------------------------------
# GET all-locations
# ---------------------------------------------------------------------------

def test_all_locations_empty(client):
    data = client.get("/api/location/all-locations").json()
    assert data == {"count": 0, "locations": []}


def test_all_locations_excludes_stale(client, clock):
    _update(client, BUS_601, MIET)
    clock.advance(minutes=6)
    _update(client, BUS_602, MIET)
    data = client.get("/api/location/all-locations").json()
    assert data["count"] == 1
    assert [loc["vehicle_id"] for loc in data["locations"]] == [BUS_602]


# ---------------------------------------------------------------------------
# GET submission-check
# ---------------------------------------------------------------------------

def test_submission_check_within_range(client):
    _update(client, BUS_601, CANTT)
    resp = client.get(
        f"/api/location/submission-check/{BUS_601}",
        params={"trip_type": "home-to-campus"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["vehicle_id"] == BUS_601
    assert data["target_name"] == "Meerut Cantt"
    assert data["within_range"] is True


def test_submission_check_out_of_range(client):
    _update(client, BUS_601, MIET)
    data = client.get(
        f"/api/location/submission-check/{BUS_601}",
        params={"trip_type": "campus-to-home"},
    ).json()
    assert data["target_name"] == "modipuram"
    assert data["within_range"] is False
    assert data["distance_km"] > 1.0


def test_submission_check_bad_trip_type_is_422(client):
    _update(client, BUS_601, MIET)
    resp = client.get(
        f"/api/location/submission-check/{BUS_601}",
        params={"trip_type": "sideways"},
    )
    assert resp.status_code == 422


def test_submission_check_requires_fresh_fix(client, clock):
    _update(client, BUS_601, CANTT)
    clock.advance(minutes=10)
    resp = client.get(
        f"/api/location/submission-check/{BUS_601}",
        params={"trip_type": "home-to-campus"},
    )
    assert resp.status_code == 404


def test_future_device_timestamp_does_not_lock_vehicle(client, clock):
    _update(client, BUS_601, {**MIET, "timestamp": "2027-01-01T00:00:00Z"})
    clock.advance(minutes=10)
    resp = _update(client, BUS_601, ROHTA)
    assert resp.json()["accepted"] is True

    data = client.get(f"/api/location/current-location/{BUS_601}").json()
    assert data["state"] == "fresh"
    assert data["location"]["nearest_waypoint_name"] == "rohta bypass"
    assert client.get("/api/location/all-locations").json()["count"] == 1


def test_stale_slot_accepts_device_timestamp_older_than_stored(client, clock):
    _update(client, BUS_601, MIET)
    clock.advance(minutes=10)
    resp = _update(client, BUS_601, {**ROHTA, "timestamp": "2026-03-02T07:00:00Z"})
    assert resp.json()["accepted"] is True
    data = client.get(f"/api/location/current-location/{BUS_601}").json()
    assert data["state"] == "fresh"
