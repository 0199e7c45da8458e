"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rollcall.api.dependencies import close_services, init_services
from rollcall.api.models import APIResponse, location_to_response
from rollcall.api.routes import attendance, courses, directory, sessions
from rollcall.config import Settings, load_settings
from rollcall.directory import (
    CourseExistsError,
    CourseNotFoundError,
    DirectoryError,
    EnrollmentExistsError,
    UserExistsError,
    UserNotFoundError,
)
from rollcall.location import LocationRejectedError
from rollcall.session_manager import (
    AlreadyMarkedError,
    InvalidCodeError,
    InvalidDurationError,
    SessionManagerError,
)
from rollcall.session_store import MarkExistsError, SessionNotFoundError, SessionStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Exception type -> (HTTP status, fixed message or None to use the exception text)
ERROR_STATUS: list[tuple[type[Exception], int, str | None]] = [
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND, "Session not found"),
    (CourseNotFoundError, status.HTTP_404_NOT_FOUND, "Course not found"),
    (UserNotFoundError, status.HTTP_404_NOT_FOUND, "User not found"),
    (InvalidCodeError, status.HTTP_404_NOT_FOUND, "Invalid access code"),
    (AlreadyMarkedError, status.HTTP_409_CONFLICT, None),
    (MarkExistsError, status.HTTP_409_CONFLICT, "Attendance already marked"),
    (UserExistsError, status.HTTP_409_CONFLICT, None),
    (CourseExistsError, status.HTTP_409_CONFLICT, None),
    (EnrollmentExistsError, status.HTTP_409_CONFLICT, None),
    (InvalidDurationError, 422, None),
    (SessionManagerError, status.HTTP_400_BAD_REQUEST, None),
    (SessionStoreError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
    (DirectoryError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
]


def _make_handler(status_code: int, message: str | None):  # noqa: ANN202
    async def handler(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=APIResponse[None](data=None, error=message or str(exc)).model_dump(),
        )

    return handler


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain errors into APIResponse error bodies."""
    for exc_type, status_code, message in ERROR_STATUS:
        app.add_exception_handler(exc_type, _make_handler(status_code, message))

    @app.exception_handler(LocationRejectedError)
    async def location_rejected_handler(
        _request: Request, exc: LocationRejectedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={
                "data": location_to_response(exc.verification).model_dump(),
                "error": exc.verification.message,
            },
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = getattr(app.state, "settings", None) or load_settings()
    init_services(settings)
    yield
    close_services()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Rollcall API",
        description="REST API for Rollcall - university attendance sessions",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager (None means load from the environment)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(sessions.router, prefix="/api/v1")
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(attendance.router, prefix="/api/v1")
    app.include_router(directory.router, prefix="/api/v1")

    return app


# Default app instance; settings come from ROLLCALL_* at startup
app = create_app()
