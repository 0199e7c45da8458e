"""SessionStore - Persistence API for attendance sessions and marks."""

from __future__ import annotations

import logging
from datetime import datetime  # noqa: TC003 - used at runtime in signatures
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from rollcall.session_store.database import Database
from rollcall.session_store.exceptions import (
    MarkExistsError,
    SessionNotFoundError,
    SessionStatusMismatchError,
)
from rollcall.session_store.models import AttendanceMark, AttendanceSession

logger = logging.getLogger(__name__)

# Columns that may change after a session is created
MUTABLE_SESSION_FIELDS = frozenset(
    {
        "scheduled_at",
        "duration_seconds",
        "expires_at",
        "status",
        "armed",
        "remaining_seconds",
        "ended_at",
        "latitude",
        "longitude",
        "location_label",
    }
)


class SessionStore:
    """Durable store for attendance sessions and the marks recorded against them.

    Every call runs in its own short-lived SQLAlchemy session so that the
    store holds no state between calls and can be shared by concurrent
    request handlers.
    """

    def __init__(self, db_path: str = "rollcall.db", database: Database | None = None) -> None:
        """Initialize the store, creating tables if they don't exist.

        Args:
            db_path: Path to SQLite database file. Ignored when ``database`` is given.
            database: An existing Database to share with other components.
        """
        self._db = database if database is not None else Database(db_path)
        self._db.create_tables()

    @property
    def database(self) -> Database:
        return self._db

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- Session Operations ---

    def create_session(
        self,
        course_code: str,
        access_code: str,
        scheduled_at: datetime,
        expires_at: datetime | None,
        teacher_name: str = "",
        teacher_username: str = "",
    ) -> AttendanceSession:
        """Persist a new attendance session.

        Args:
            course_code: Code of the course the session belongs to
            access_code: Token students submit to be marked
            scheduled_at: Start instant of the session
            expires_at: Initial expiry instant (may be None)
            teacher_name: Display name of the teacher who opened it
            teacher_username: Username of the teacher who opened it

        Returns:
            Created AttendanceSession with generated ID
        """
        session = self._db.get_session()
        try:
            attendance_session = AttendanceSession(
                course_code=course_code,
                access_code=access_code,
                scheduled_at=scheduled_at,
                expires_at=expires_at,
                teacher_name=teacher_name,
                teacher_username=teacher_username,
            )
            session.add(attendance_session)
            session.commit()
            session.refresh(attendance_session)
            return attendance_session
        finally:
            session.close()

    def get_session(self, session_id: str) -> AttendanceSession:
        """Get an attendance session by ID.

        Raises:
            SessionNotFoundError: If the session doesn't exist
        """
        session = self._db.get_session()
        try:
            attendance_session = session.get(AttendanceSession, session_id)
            if attendance_session is None:
                raise SessionNotFoundError(f"Session with id '{session_id}' not found")
            return attendance_session
        finally:
            session.close()

    def find_latest_by_access_code(self, access_code: str) -> AttendanceSession | None:
        """Most recently created session carrying the given access code, if any."""
        session = self._db.get_session()
        try:
            stmt = (
                select(AttendanceSession)
                .where(AttendanceSession.access_code == access_code)
                .order_by(AttendanceSession.created_at.desc())
                .limit(1)
            )
            return session.execute(stmt).scalar_one_or_none()
        finally:
            session.close()

    def find_latest_for_course(self, course_code: str) -> AttendanceSession | None:
        """Most recently created session of a course, if any."""
        session = self._db.get_session()
        try:
            stmt = (
                select(AttendanceSession)
                .where(AttendanceSession.course_code == course_code)
                .order_by(AttendanceSession.created_at.desc())
                .limit(1)
            )
            return session.execute(stmt).scalar_one_or_none()
        finally:
            session.close()

    def list_sessions(self, course_code: str | None = None) -> list[AttendanceSession]:
        """List sessions, optionally filtered by course.

        Returns:
            Sessions ordered by created_at descending (most recent first)
        """
        session = self._db.get_session()
        try:
            stmt = select(AttendanceSession)
            if course_code is not None:
                stmt = stmt.where(AttendanceSession.course_code == course_code)
            stmt = stmt.order_by(AttendanceSession.created_at.desc())
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def update_session(
        self, session_id: str, require_status: str | None = None, **changes: Any
    ) -> AttendanceSession:
        """Write the given fields to a session row.

        Unlike a partial update that skips None, every passed field is written,
        so ``remaining_seconds=None`` clears the column. Concurrent writers to
        the same row resolve last-write-wins unless ``require_status`` is given,
        in which case the row is only written while it still has that status.

        Args:
            session_id: The session's unique ID
            require_status: Status the row must still have for the write to apply
            **changes: Column values to write; names must be in MUTABLE_SESSION_FIELDS

        Returns:
            The updated AttendanceSession

        Raises:
            SessionNotFoundError: If the session doesn't exist
            SessionStatusMismatchError: If the row no longer has ``require_status``
            ValueError: If a field is unknown or immutable
        """
        invalid = sorted(set(changes) - MUTABLE_SESSION_FIELDS)
        if invalid:
            raise ValueError(f"Cannot update session fields: {', '.join(invalid)}")

        if not changes:
            return self.get_session(session_id)

        session = self._db.get_session()
        try:
            # UPDATE first so the transaction takes the write lock up front
            stmt = update(AttendanceSession).where(AttendanceSession.id == session_id)
            if require_status is not None:
                stmt = stmt.where(AttendanceSession.status == str(require_status))
            stmt = stmt.values(**changes).execution_options(synchronize_session=False)
            result = session.execute(stmt)
            if result.rowcount == 0:
                session.rollback()
                current = session.get(AttendanceSession, session_id)
                if current is None:
                    raise SessionNotFoundError(f"Session with id '{session_id}' not found")
                raise SessionStatusMismatchError(
                    f"Session '{session_id}' is {current.status}, expected {require_status}"
                )
            session.commit()
        finally:
            session.close()

        return self.get_session(session_id)

        session = self._db.get_session()
        try:
            # UPDATE first so the transaction takes the write lock up front
            stmt = (
                update(AttendanceSession)
                .where(AttendanceSession.id == session_id)
                .values(**changes)
                .execution_options(synchronize_session=False)
            )
            result = session.execute(stmt)
            if result.rowcount == 0:
                session.rollback()
                raise SessionNotFoundError(f"Session with id '{session_id}' not found")
            session.commit()
        finally:
            session.close()

        return self.get_session(session_id)

    # --- Mark Operations ---

    def create_mark(
        self,
        student_id: int,
        course_code: str,
        session_id: str,
        access_code: str,
        marked_at: datetime,
    ) -> AttendanceMark:
        """Append a mark for a student.

        The INSERT is the first statement of its transaction, so competing
        submissions for the same (student, session) are serialised by the
        unique index rather than by a read-then-write check.

        Returns:
            Created AttendanceMark with generated ID

        Raises:
            MarkExistsError: If the student already has a mark for this session
        """
        session = self._db.get_session()
        try:
            mark = AttendanceMark(
                student_id=student_id,
                course_code=course_code,
                session_id=session_id,
                access_code=access_code,
                marked_at=marked_at,
            )
            session.add(mark)
            session.commit()
            session.refresh(mark)
            return mark
        except IntegrityError as e:
            session.rollback()
            if "UNIQUE constraint failed" in str(e) or "uq_attendance_marks" in str(e):
                logger.info(
                    "Duplicate mark rejected for student %s in session %s", student_id, session_id
                )
                raise MarkExistsError(
                    f"Student '{student_id}' already marked for session '{session_id}'"
                ) from e
            raise
        finally:
            session.close()

    def has_mark(self, student_id: int, session_id: str) -> bool:
        session = self._db.get_session()
        try:
            stmt = select(AttendanceMark.id).where(
                AttendanceMark.student_id == student_id,
                AttendanceMark.session_id == session_id,
            )
            return session.execute(stmt).first() is not None
        finally:
            session.close()

    def count_marks(self, session_id: str) -> int:
        """Number of marks recorded against a session."""
        session = self._db.get_session()
        try:
            stmt = select(func.count(AttendanceMark.id)).where(
                AttendanceMark.session_id == session_id
            )
            return int(session.execute(stmt).scalar_one())
        finally:
            session.close()

    def list_marks(self, session_id: str) -> list[AttendanceMark]:
        """List marks of a session, oldest first."""
        session = self._db.get_session()
        try:
            stmt = (
                select(AttendanceMark)
                .where(AttendanceMark.session_id == session_id)
                .order_by(AttendanceMark.marked_at)
            )
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()

    def last_mark_time(self, session_id: str) -> datetime | None:
        """Timestamp of the most recent mark of a session, if any."""
        session = self._db.get_session()
        try:
            stmt = select(func.max(AttendanceMark.marked_at)).where(
                AttendanceMark.session_id == session_id
            )
            return session.execute(stmt).scalar_one()
        finally:
            session.close()
