"""
HTTP API tests.
"""
from residence_engine.config.settings import settings

from conftest import make_room

API = settings.API_V1_STR


def allocate(client, student_id, room_id, bed=None):
    payload = {"student_id": student_id, "room_id": room_id}
    if bed:
        payload["bed_label"] = bed
    return client.post(f"{API}/residences/on-campus", json=payload)


class TestHostelsApi:
    def test_create_list_get(self, client, staff):
        response = client.post(
            f"{API}/hostels",
            json={"name": "Old Men Dorm", "gender_restriction": "male", "total_room_count": 40, "warden_ref": staff.id},
        )
        assert response.status_code == 201
        hostel_id = response.json()["id"]

        room = client.post(f"{API}/rooms", json={"hostel_id": hostel_id, "room_number": "1A01", "capacity": 2})
        assert room.status_code == 201

        assert [h["name"] for h in client.get(f"{API}/hostels", params={"gender": "male"}).json()] == ["Old Men Dorm"]
        detail = client.get(f"{API}/hostels/{hostel_id}").json()
        assert [r["room_number"] for r in detail["rooms"]] == ["1A01"]

    def test_duplicate_name_conflict(self, client, men_hostel):
        response = client.post(f"{API}/hostels", json={"name": "New Men Dorm", "gender_restriction": "male"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    def test_unknown_hostel(self, client):
        response = client.get(f"{API}/hostels/missing")

        assert response.status_code == 404
        assert response.json()["error"]["retryable"] is False


class TestRoomsApi:
    def test_capacity_below_one(self, client, men_hostel):
        response = client.post(f"{API}/rooms", json={"hostel_id": men_hostel.id, "room_number": "9", "capacity": 0})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_malformed_body_uses_error_format(self, client):
        response = client.post(f"{API}/rooms", json={"room_number": "9"})

        assert response.status_code == 422
        body = response.json()["error"]
        assert body["code"] == "VALIDATION_ERROR"
        assert "hostel_id" in body["details"]["field_errors"]

    def test_maintenance_and_available_filter(self, client, r1, r2):
        response = client.put(f"{API}/rooms/{r1.id}/maintenance", json={"enabled": True})
        assert response.status_code == 200
        assert response.json()["status"] == "maintenance"

        available = client.get(f"{API}/rooms", params={"available": "true"}).json()
        assert [room["id"] for room in available] == [r2.id]

    def test_occupants(self, client, r1, student_a, student_b):
        allocate(client, student_a.id, r1.id, "Bed A")
        allocate(client, student_b.id, r1.id, "Bed B")

        occupants = client.get(f"{API}/rooms/{r1.id}/occupants").json()

        assert [o["bed_label"] for o in occupants] == ["Bed A", "Bed B"]


class TestResidencesApi:
    def test_scenario_fill_r1(self, client, r1, student_a, student_b, student_c):
        first = allocate(client, student_a.id, r1.id, "A")
        assert first.status_code == 201
        room = client.get(f"{API}/rooms/{r1.id}").json()
        assert (room["current_occupancy"], room["status"]) == (1, "available")

        assert allocate(client, student_b.id, r1.id, "B").status_code == 201
        room = client.get(f"{API}/rooms/{r1.id}").json()
        assert (room["current_occupancy"], room["status"]) == (2, "full")

        third = allocate(client, student_c.id, r1.id)
        assert third.status_code == 409
        assert third.json()["error"]["code"] == "ROOM_FULL"

    def test_gender_mismatch(self, client, r1, student_d):
        response = allocate(client, student_d.id, r1.id)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "GENDER_MISMATCH"
        assert client.get(f"{API}/rooms/{r1.id}").json()["current_occupancy"] == 0

    def test_already_resident(self, client, r1, r2, student_a):
        allocate(client, student_a.id, r1.id)

        response = allocate(client, student_a.id, r2.id)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_RESIDENT"

    def test_off_campus_lookup_and_vacate(self, client, student_a):
        created = client.post(
            f"{API}/residences/off-campus",
            json={"student_id": "S-A", "off_campus_hostel_name": "Sunrise Apartments", "off_campus_area": "Kapsabet"},
        )
        assert created.status_code == 201
        assert created.json()["kind"] == "off-campus"

        assert client.get(f"{API}/residences/by-area").json() == [{"area": "Kapsabet", "count": 1}]
        assert client.get(f"{API}/residences", params={"kind": "off-campus"}).json()[0]["student_id"] == student_a.id
        assert client.get(f"{API}/residences/{student_a.id}").status_code == 200

        assert client.delete(f"{API}/residences/{student_a.id}").status_code == 204
        assert client.get(f"{API}/residences/{student_a.id}").status_code == 404

    def test_vacate_frees_room(self, client, r1, student_a):
        allocate(client, student_a.id, r1.id)

        assert client.delete(f"{API}/residences/{student_a.id}").status_code == 204
        assert client.get(f"{API}/rooms/{r1.id}").json()["current_occupancy"] == 0


class TestBookingsApi:
    def test_transfer_scenarios(self, client, db_session, men_hostel, staff, r1, r2, student_a, student_b):
        r3 = make_room(db_session, men_hostel, "R3", capacity=1)
        allocate(client, student_a.id, r1.id, "A")
        allocate(client, student_b.id, r1.id, "B")

        submitted = client.post(
            f"{API}/bookings",
            json={"student_id": student_a.id, "request_type": "transfer", "requested_room_id": r2.id},
        )
        assert submitted.status_code == 201
        booking = submitted.json()
        assert booking["status"] == "pending"
        assert booking["current_room_id"] == r1.id

        decided = client.put(
            f"{API}/bookings/{booking['id']}/decision",
            json={"decision": "approved", "approver_id": staff.id},
        )
        assert decided.status_code == 200
        assert decided.json()["status"] == "approved"
        assert client.get(f"{API}/rooms/{r1.id}").json()["current_occupancy"] == 1
        assert client.get(f"{API}/rooms/{r2.id}").json()["current_occupancy"] == 1
        assert client.get(f"{API}/residences/{student_a.id}").json()["room_id"] == r2.id

        again = client.put(
            f"{API}/bookings/{booking['id']}/decision",
            json={"decision": "rejected", "approver_id": staff.id},
        )
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "ALREADY_DECIDED"

        # R3 is filled by B's transfer, then A asks for it too
        to_r3 = client.post(
            f"{API}/bookings",
            json={"student_id": student_b.id, "request_type": "transfer", "requested_room_id": r3.id},
        ).json()
        client.put(f"{API}/bookings/{to_r3['id']}/decision", json={"decision": "approved", "approver_id": staff.id})

        blocked = client.post(
            f"{API}/bookings",
            json={"student_id": student_a.id, "request_type": "transfer", "requested_room_id": r3.id},
        ).json()
        refused = client.put(
            f"{API}/bookings/{blocked['id']}/decision",
            json={"decision": "approved", "approver_id": staff.id},
        )
        assert refused.status_code == 409
        assert refused.json()["error"]["code"] == "ROOM_FULL"
        assert client.get(f"{API}/bookings/{blocked['id']}").json()["status"] == "pending"
        assert client.get(f"{API}/residences/{student_a.id}").json()["room_id"] == r2.id

    def test_target_must_be_exclusive(self, client, r1, student_a):
        response = client.post(
            f"{API}/bookings",
            json={
                "student_id": student_a.id,
                "requested_room_id": r1.id,
                "requested_off_campus_hostel_name": "Lodge",
                "requested_off_campus_area": "Kapsabet",
            },
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_request_type(self, client, r1, student_a):
        response = client.post(
            f"{API}/bookings",
            json={"student_id": student_a.id, "request_type": "upgrade", "requested_room_id": r1.id},
        )

        assert response.status_code == 422

    def test_list_filters(self, client, r1, student_a):
        client.post(f"{API}/bookings", json={"student_id": student_a.id, "requested_room_id": r1.id})

        assert len(client.get(f"{API}/bookings", params={"status": "pending"}).json()) == 1
        assert client.get(f"{API}/bookings", params={"status": "approved"}).json() == []
        assert client.get(f"{API}/bookings/missing").status_code == 404


def test_health_and_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in response.headers
