"""Unit tests for attendance and student routes."""

import pytest
from fastapi.testclient import TestClient

from rollcall.session_manager import SessionManager

HALL_LAT = 31.5204
HALL_LON = 74.3587


@pytest.fixture
def session(manager: SessionManager):
    """A started CS101 session with a classroom reference point."""
    created = manager.generate("CS101", "Grace Hopper", "ghopper")
    return manager.start(created.id, 120, latitude=HALL_LAT, longitude=HALL_LON)


def _mark(client: TestClient, access_code: str, student_id: int = 1, **extra):
    body = {"access_code": access_code, "student_id": student_id, "course_code": "CS101"}
    body.update(extra)
    return client.post("/api/v1/attendance/mark", json=body)


@pytest.mark.unit
class TestMarkAttendance:
    """Tests for POST /attendance/mark."""

    def test_mark(self, client: TestClient, session) -> None:
        response = _mark(client, session.access_code)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["student_id"] == 1
        assert data["session_id"] == session.id
        assert data["status"] == "present"

    def test_mark_with_other_course(self, client: TestClient, session) -> None:
        body = {"access_code": session.access_code, "student_id": 1, "course_code": "MA201"}
        response = client.post("/api/v1/attendance/mark", json=body)

        assert response.status_code == 400
        assert "MA201" in response.json()["error"]

    def test_mark_twice_conflicts(self, client: TestClient, session) -> None:
        _mark(client, session.access_code)
        response = _mark(client, session.access_code)

        assert response.status_code == 409
        assert "already marked" in response.json()["error"]

    def test_invalid_code(self, client: TestClient, session) -> None:
        response = _mark(client, "wrong-code")
        assert response.status_code == 404
        assert response.json() == {"data": None, "error": "Invalid access code"}

    def test_expired(self, client: TestClient, session, clock) -> None:
        clock.advance(121)
        response = _mark(client, session.access_code)
        assert response.status_code == 400
        assert response.json()["error"] == "Attendance session expired"

    def test_paused(self, client: TestClient, session, manager: SessionManager) -> None:
        manager.pause(session.id)
        response = _mark(client, session.access_code)
        assert response.status_code == 400
        assert "paused" in response.json()["error"]

    def test_stopped(self, client: TestClient, session, manager: SessionManager) -> None:
        manager.stop(session.id)
        response = _mark(client, session.access_code)
        assert response.status_code == 400
        assert "not active" in response.json()["error"]

    def test_mark_near_classroom(self, client: TestClient, session) -> None:
        response = _mark(client, session.access_code, latitude=HALL_LAT, longitude=HALL_LON)
        assert response.status_code == 201

    def test_mark_too_far_is_forbidden(
        self, client: TestClient, session, manager: SessionManager
    ) -> None:
        response = _mark(client, session.access_code, latitude=HALL_LAT + 0.01, longitude=HALL_LON)

        assert response.status_code == 403
        body = response.json()
        assert body["data"]["verified"] is False
        assert "too far" in body["error"]
        assert manager.get_attendees(session.id) == []

    def test_location_checked_only_with_both_coordinates(
        self, client: TestClient, session
    ) -> None:
        response = _mark(client, session.access_code, latitude=HALL_LAT + 0.01)
        assert response.status_code == 201

    def test_validation(self, client: TestClient, session) -> None:
        response = _mark(client, session.access_code, student_id=0)
        assert response.status_code == 422


@pytest.mark.unit
class TestVerifyLocation:
    """Tests for POST /attendance/verify-location."""

    def test_verify_tolerance_band(self, client: TestClient, session) -> None:
        response = client.post(
            "/api/v1/attendance/verify-location",
            json={
                "access_code": session.access_code,
                "latitude": HALL_LAT + 0.003,
                "longitude": HALL_LON,
            },
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["verified"] is True
        assert data["within_tolerance_only"] is True

    def test_verify_unknown_code(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/attendance/verify-location",
            json={"access_code": "nope", "latitude": 0.0, "longitude": 0.0},
        )
        assert response.status_code == 404


@pytest.mark.unit
class TestStudentActiveSession:
    """Tests for GET /students/{id}/active-session."""

    def test_enrolled_student_sees_session(self, client: TestClient, session, directory) -> None:
        directory.enroll(1, "CS101")

        response = client.get("/api/v1/students/1/active-session")
        data = response.json()["data"]
        assert data["id"] == session.id
        assert "access_code" not in data

    def test_no_enrollment(self, client: TestClient, session) -> None:
        response = client.get("/api/v1/students/2/active-session")
        assert response.status_code == 200
        assert response.json() == {"data": None, "error": None}
