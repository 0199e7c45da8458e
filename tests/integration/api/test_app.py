"""Integration tests for the assembled application."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from rollcall.api import create_app
from rollcall.api.dependencies import build_services
from rollcall.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(db_path=str(tmp_path / "rollcall.db"), max_duration_seconds=90)


@pytest.fixture
def client(settings: Settings):
    """Client over the real app; entering the context runs the lifespan."""
    with TestClient(create_app(settings), raise_server_exceptions=False) as c:
        yield c


@pytest.mark.integration
class TestAttendanceFlow:
    """A full lecture driven through HTTP."""

    def test_full_flow(self, client: TestClient) -> None:
        assert client.post(
            "/api/v1/directory/courses", json={"code": "CS101", "title": "Intro"}
        ).status_code == 201
        assert client.post(
            "/api/v1/directory/users",
            json={"username": "s1001", "first_name": "Ada", "last_name": "Lovelace", "id": 1},
        ).status_code == 201
        assert client.post(
            "/api/v1/directory/enrollments", json={"student_id": 1, "course_code": "CS101"}
        ).status_code == 201

        generated = client.post(
            "/api/v1/sessions",
            json={"course_code": "CS101", "teacher_name": "Grace", "teacher_username": "ghopper"},
        ).json()["data"]
        session_id = generated["id"]

        started = client.post(
            f"/api/v1/sessions/{session_id}/start", json={"duration_seconds": 300}
        ).json()["data"]
        assert started["duration_seconds"] == 90

        active = client.get("/api/v1/students/1/active-session").json()["data"]
        assert active["id"] == session_id

        mark = {"access_code": generated["access_code"], "student_id": 1, "course_code": "CS101"}
        assert client.post("/api/v1/attendance/mark", json=mark).status_code == 201
        assert client.post("/api/v1/attendance/mark", json=mark).status_code == 409

        attendees = client.get(f"/api/v1/sessions/{session_id}/attendees").json()["data"]
        assert [a["student_name"] for a in attendees] == ["Ada Lovelace"]

        client.post(f"/api/v1/sessions/{session_id}/stop")
        status = client.get(f"/api/v1/sessions/{session_id}/status").json()["data"]
        assert status["phase"] == "ended"
        assert status["is_active"] is False

        response = client.post("/api/v1/attendance/mark", json={**mark, "student_id": 2})
        assert response.status_code == 400

    def test_state_visible_to_second_instance(
        self, client: TestClient, settings: Settings
    ) -> None:
        """Another process over the same database sees sessions created via HTTP."""
        client.post("/api/v1/directory/courses", json={"code": "CS101", "title": "Intro"})
        generated = client.post(
            "/api/v1/sessions",
            json={"course_code": "CS101", "teacher_name": "Grace", "teacher_username": "ghopper"},
        ).json()["data"]

        services = build_services(settings)
        try:
            session = services.manager.find_session_by_code(generated["access_code"])
            assert session.id == generated["id"]
        finally:
            services.close()


@pytest.mark.integration
class TestServicesLifecycle:
    """Dependencies are only available while the app is running."""

    def test_routes_fail_before_startup(self, settings: Settings) -> None:
        client = TestClient(create_app(settings), raise_server_exceptions=False)
        response = client.get("/api/v1/sessions/anything")
        assert response.status_code == 500
