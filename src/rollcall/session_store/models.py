"""SQLAlchemy models for Session Store."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    TypeDecorator,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class SessionStatus(StrEnum):
    """Stored lifecycle status of an attendance session."""

    ACTIVE = "active"
    ENDED = "ended"


class MarkStatus(StrEnum):
    """Status recorded on an attendance mark."""

    PRESENT = "present"


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    """DateTime column that stores naive UTC and loads aware UTC.

    SQLite has no timezone support, so values are normalised on the way in
    and tagged with UTC on the way out.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AttendanceSession(Base):
    """A time-boxed window during which one course's attendance can be claimed.

    ``expires_at`` is only meaningful while the session is active and armed.
    While paused, ``remaining_seconds`` holds the frozen countdown and
    ``expires_at`` keeps the last armed expiry as the upper bound of the
    marking window.
    """

    __tablename__ = "attendance_sessions"
    __table_args__ = (
        Index("ix_attendance_sessions_access_code", "access_code"),
        Index("ix_attendance_sessions_course_code", "course_code"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    course_code: Mapped[str] = mapped_column(String(50), nullable=False)
    access_code: Mapped[str] = mapped_column(String(128), nullable=False)
    scheduled_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    armed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    remaining_seconds: Mapped[float | None] = mapped_column(Float, nullable=True)
    ended_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    teacher_name: Mapped[str] = mapped_column(String(255), nullable=False)
    teacher_username: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    def __init__(
        self,
        course_code: str,
        access_code: str,
        scheduled_at: datetime,
        teacher_name: str = "",
        teacher_username: str = "",
        id: str | None = None,
        expires_at: datetime | None = None,
        duration_seconds: int | None = None,
        status: str | None = None,
        armed: bool = True,
        created_at: datetime | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.course_code = course_code
        self.access_code = access_code
        self.scheduled_at = scheduled_at
        self.expires_at = expires_at
        self.duration_seconds = duration_seconds
        self.status = status if status is not None else SessionStatus.ACTIVE.value
        self.armed = armed
        self.remaining_seconds = None
        self.ended_at = None
        self.teacher_name = teacher_name
        self.teacher_username = teacher_username
        self.latitude = None
        self.longitude = None
        self.location_label = None
        self.created_at = created_at if created_at is not None else utcnow()

    @property
    def session_status(self) -> SessionStatus:
        """Get status as SessionStatus enum."""
        return SessionStatus(self.status)

    @property
    def has_reference_point(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def __repr__(self) -> str:
        return (
            f"<AttendanceSession(id={self.id!r}, course_code={self.course_code!r}, "
            f"status={self.status!r}, armed={self.armed!r})>"
        )


class AttendanceMark(Base):
    """One student's successful attendance claim against a session.

    Marks are append-only. The unique constraint on (student_id, session_id)
    is what guarantees a student is marked at most once per session, even
    when submissions race.
    """

    __tablename__ = "attendance_marks"
    __table_args__ = (
        UniqueConstraint("student_id", "session_id", name="uq_attendance_marks_student_session"),
        Index("ix_attendance_marks_session_id", "session_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    student_id: Mapped[int] = mapped_column(Integer, nullable=False)
    course_code: Mapped[str] = mapped_column(String(50), nullable=False)
    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("attendance_sessions.id"), nullable=False
    )
    access_code: Mapped[str] = mapped_column(String(128), nullable=False)
    marked_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)

    def __init__(
        self,
        student_id: int,
        course_code: str,
        session_id: str,
        access_code: str,
        marked_at: datetime,
        id: str | None = None,
        status: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.student_id = student_id
        self.course_code = course_code
        self.session_id = session_id
        self.access_code = access_code
        self.marked_at = marked_at
        self.status = status if status is not None else MarkStatus.PRESENT.value

    def __repr__(self) -> str:
        return (
            f"<AttendanceMark(id={self.id!r}, student_id={self.student_id!r}, "
            f"session_id={self.session_id!r})>"
        )
