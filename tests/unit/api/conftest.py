"""Fixtures for API route tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from rollcall.api.app import register_exception_handlers
from rollcall.api.dependencies import get_directory, get_location_verifier, get_session_manager
from rollcall.api.routes import attendance, courses, sessions
from rollcall.api.routes import directory as directory_routes
from rollcall.directory import Directory
from rollcall.location import LocationVerifier
from rollcall.session_manager import SessionManager


@pytest.fixture
def app(manager: SessionManager, directory: Directory) -> FastAPI:
    """Create a test FastAPI app wired to in-memory components."""
    app = FastAPI()
    register_exception_handlers(app)

    def override_get_session_manager():
        yield manager

    def override_get_directory():
        yield directory

    def override_get_location_verifier():
        yield LocationVerifier()

    app.dependency_overrides[get_session_manager] = override_get_session_manager
    app.dependency_overrides[get_directory] = override_get_directory
    app.dependency_overrides[get_location_verifier] = override_get_location_verifier

    app.include_router(sessions.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(attendance.router, prefix="/api/v1")
    app.include_router(directory_routes.router, prefix="/api/v1")
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client."""
    return TestClient(app, raise_server_exceptions=False)
