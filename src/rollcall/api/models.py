"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Session models


class SessionGenerate(BaseModel):
    """Request model for opening a new attendance session."""

    course_code: str = Field(..., min_length=1, max_length=50)
    teacher_name: str = Field(..., min_length=1, max_length=255)
    teacher_username: str = Field(..., min_length=1, max_length=255)


class SessionStart(BaseModel):
    """Request model for starting the attendance countdown."""

    duration_seconds: int = Field(..., ge=1)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    location_label: str | None = Field(default=None, max_length=255)


class SessionResponse(BaseModel):
    """Teacher-facing view of a session, including its access code."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    course_code: str
    access_code: str
    scheduled_at: datetime
    duration_seconds: int | None
    expires_at: datetime | None
    status: str
    armed: bool
    remaining_seconds: float | None
    ended_at: datetime | None
    teacher_name: str
    teacher_username: str
    latitude: float | None
    longitude: float | None
    location_label: str | None
    created_at: datetime


def session_to_response(session: Any) -> SessionResponse:
    """Convert an AttendanceSession model to SessionResponse."""
    return SessionResponse.model_validate(session)


class StudentSessionResponse(BaseModel):
    """Student-facing view of an active session. The access code is withheld."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    course_code: str
    expires_at: datetime | None
    status: str
    armed: bool
    teacher_name: str
    teacher_username: str


def student_session_to_response(session: Any) -> StudentSessionResponse:
    """Convert an AttendanceSession model to StudentSessionResponse."""
    return StudentSessionResponse.model_validate(session)


class SessionStatusResponse(BaseModel):
    """Response model for the live status of a session."""

    session_id: str
    is_active: bool
    remaining_seconds: float
    phase: str


class SessionStatisticsResponse(BaseModel):
    """Response model for session statistics."""

    model_config = ConfigDict(from_attributes=True)

    session_id: str
    course_code: str
    session_start: datetime
    session_end: datetime | None
    access_code: str
    total_attendees: int
    is_active: bool
    remaining_seconds: float
    phase: str


def statistics_to_response(stats: Any) -> SessionStatisticsResponse:
    """Convert a SessionStatistics dataclass to SessionStatisticsResponse."""
    return SessionStatisticsResponse.model_validate(stats)


class AttendeeResponse(BaseModel):
    """Response model for a valid attendee of a session."""

    model_config = ConfigDict(from_attributes=True)

    mark_id: str
    student_id: int
    student_name: str
    roll_number: str
    access_code: str
    marked_at: datetime
    status: str
    session_start: datetime
    session_end: datetime | None


def attendee_to_response(detail: Any) -> AttendeeResponse:
    """Convert an AttendeeDetail dataclass to AttendeeResponse."""
    return AttendeeResponse.model_validate(detail)


# Attendance models


class MarkRequest(BaseModel):
    """Request model for a student's attendance submission.

    Coordinates are optional. When both are given the location is checked
    against the session's reference point before the mark is attempted.
    """

    access_code: str = Field(..., min_length=1, max_length=128)
    student_id: int = Field(..., ge=1)
    course_code: str = Field(..., min_length=1, max_length=50)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class MarkResponse(BaseModel):
    """Response model for a recorded mark."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: int
    course_code: str
    session_id: str
    marked_at: datetime
    status: str


def mark_to_response(mark: Any) -> MarkResponse:
    """Convert an AttendanceMark model to MarkResponse."""
    return MarkResponse.model_validate(mark)


class LocationRequest(BaseModel):
    """Request model for an advisory location check."""

    access_code: str = Field(..., min_length=1, max_length=128)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationResponse(BaseModel):
    """Response model for a location check."""

    model_config = ConfigDict(from_attributes=True)

    verified: bool
    message: str
    distance_m: float
    allowed_radius_m: float
    within_tolerance_only: bool


def location_to_response(result: Any) -> LocationResponse:
    """Convert a LocationVerification dataclass to LocationResponse."""
    return LocationResponse.model_validate(result)


# Directory models


class UserCreate(BaseModel):
    """Request model for registering a directory user."""

    username: str = Field(..., min_length=1, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(default="", max_length=255)
    role: str = Field(default="student", pattern=r"^(student|teacher|admin)$")
    id: int | None = Field(default=None, ge=1)


class UserResponse(BaseModel):
    """Response model for a directory user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    first_name: str
    last_name: str
    role: str


class CourseCreate(BaseModel):
    """Request model for registering a course."""

    code: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    credit: int = Field(default=3, ge=0, le=30)


class CourseResponse(BaseModel):
    """Response model for a course."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    title: str
    credit: int


class EnrollmentCreate(BaseModel):
    """Request model for enrolling a student in a course."""

    student_id: int = Field(..., ge=1)
    course_code: str = Field(..., min_length=1, max_length=50)


class EnrollmentResponse(BaseModel):
    """Response model for an enrollment."""

    model_config = ConfigDict(from_attributes=True)

    student_id: int
    course_code: str
