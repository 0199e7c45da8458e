"""SessionManager - Attendance session state machine."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from rollcall.config import Settings
from rollcall.directory import DirectoryError
from rollcall.logging import mask_access_code
from rollcall.session_manager.exceptions import (
    AlreadyMarkedError,
    CourseMismatchError,
    InvalidCodeError,
    InvalidDurationError,
    NothingToResumeError,
    SessionAlreadyExpiredError,
    SessionExpiredError,
    SessionNotActiveError,
    SessionNotStartedError,
    SessionNotYetStartedError,
    SessionPausedError,
)
from rollcall.session_manager.models import (
    AttendeeDetail,
    SessionPhase,
    SessionStatistics,
    derive_phase,
    seconds_remaining,
    window_is_open,
)
from rollcall.session_store import (
    MarkExistsError,
    SessionNotFoundError,
    SessionStatus,
    SessionStatusMismatchError,
)

if TYPE_CHECKING:
    from rollcall.directory import Directory
    from rollcall.session_store import AttendanceMark, AttendanceSession, SessionStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

UNKNOWN_STUDENT_NAME = "Unknown Student"
UNKNOWN_ROLL_NUMBER = "N/A"
MAX_CODE_ATTEMPTS = 5


def utc_now() -> datetime:
    return datetime.now(UTC)


class SessionManager:
    """Owns the lifecycle of attendance sessions.

    A session is generated with a short provisional window so students can
    find it, started with a committed (and capped) duration, optionally
    paused and resumed, and finally stopped. Expiry is never pushed by a
    timer: every read recomputes it from the stored fields, so any number of
    manager instances can share one store.
    """

    def __init__(
        self,
        store: SessionStore,
        directory: Directory | None = None,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the SessionManager.

        Args:
            store: SessionStore holding sessions and marks.
            directory: Optional Directory used to validate courses, resolve
                enrollments and name attendees.
            settings: Policy values (provisional window, duration cap).
            clock: Callable returning the current aware UTC time.
        """
        self.store = store
        self.directory = directory
        self.settings = settings if settings is not None else Settings()
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    # --- Transitions ---

    def generate(
        self, course_code: str, teacher_name: str, teacher_username: str
    ) -> AttendanceSession:
        """Open a new session with a fresh access code.

        The session is armed with a provisional window so students can
        discover it before the teacher starts timing. No duration is
        committed until start().

        Raises:
            CourseNotFoundError: If a directory is configured and the course is unknown.
        """
        if self.directory is not None:
            self.directory.get_course(course_code)

        now = self.now()
        access_code = self._new_access_code()
        session = self.store.create_session(
            course_code=course_code,
            access_code=access_code,
            scheduled_at=now,
            expires_at=now + timedelta(seconds=self.settings.provisional_window_seconds),
            teacher_name=teacher_name,
            teacher_username=teacher_username,
        )

        logger.info(
            "Generated session %s for course %s by %s (code %s)",
            session.id,
            course_code,
            teacher_username,
            mask_access_code(access_code),
        )
        return session

    def start(
        self,
        session_id: str,
        duration_seconds: int,
        latitude: float | None = None,
        longitude: float | None = None,
        location_label: str | None = None,
    ) -> AttendanceSession:
        """Commit a duration and arm the expiry window.

        If students already marked during the provisional window the original
        start instant is kept, and the expiry is never set before the latest
        mark, so their marks stay inside the window. Otherwise the window starts
        now. The duration is capped at ``settings.max_duration_seconds``.

        Raises:
            SessionNotFoundError: If the session doesn't exist.
            SessionNotActiveError: If the session has ended.
            InvalidDurationError: If duration_seconds is less than 1.
        """
        if duration_seconds < 1:
            raise InvalidDurationError(
                f"Duration must be at least 1 second, got {duration_seconds}"
            )

        session = self.store.get_session(session_id)
        if session.status != SessionStatus.ACTIVE.value:
            raise SessionNotActiveError("Cannot start a session that has ended")

        last_marked_at = self.store.last_mark_time(session_id)
        start_at = session.scheduled_at if last_marked_at is not None else self.now()

        duration = min(duration_seconds, self.settings.max_duration_seconds)
        if duration < duration_seconds:
            logger.info(
                "Capped duration for session %s from %ss to %ss",
                session_id,
                duration_seconds,
                duration,
            )

        expires_at = start_at + timedelta(seconds=duration)
        if last_marked_at is not None and last_marked_at > expires_at:
            expires_at = last_marked_at

        changes: dict[str, object] = {
            "scheduled_at": start_at,
            "duration_seconds": duration,
            "expires_at": expires_at,
            "armed": True,
            "remaining_seconds": None,
        }
        if latitude is not None and longitude is not None:
            changes["latitude"] = latitude
            changes["longitude"] = longitude
            changes["location_label"] = location_label

        updated = self._update_active(session_id, "start", **changes)
        logger.info(
            "Started session %s: window %s -> %s",
            session_id,
            updated.scheduled_at.isoformat(),
            updated.expires_at.isoformat() if updated.expires_at else None,
        )
        return updated

    def pause(self, session_id: str) -> AttendanceSession:
        """Freeze the countdown, keeping the remaining time.

        Raises:
            SessionNotFoundError: If the session doesn't exist.
            SessionNotActiveError: If the session has ended.
            SessionNotStartedError: If start() has not committed a window yet.
            SessionPausedError: If the session is already paused.
            SessionAlreadyExpiredError: If the window has already closed.
        """
        session = self.store.get_session(session_id)
        if session.status != SessionStatus.ACTIVE.value:
            raise SessionNotActiveError("Cannot pause a session that is not active")
        if session.expires_at is None or session.duration_seconds is None:
            raise SessionNotStartedError("Cannot pause a session that has not been started")
        if not session.armed:
            raise SessionPausedError("Session is already paused")

        remaining = (session.expires_at - self.now()).total_seconds()
        if remaining <= 0:
            raise SessionAlreadyExpiredError("Cannot pause an expired session")

        updated = self._update_active(
            session_id, "pause", armed=False, remaining_seconds=remaining
        )
        logger.info("Paused session %s with %.1fs remaining", session_id, remaining)
        return updated

    def resume(self, session_id: str) -> AttendanceSession:
        """Restart the countdown from the time saved by pause().

        Raises:
            SessionNotFoundError: If the session doesn't exist.
            SessionNotActiveError: If the session has ended.
            NothingToResumeError: If there is no paused time left.
        """
        session = self.store.get_session(session_id)
        if session.status != SessionStatus.ACTIVE.value:
            raise SessionNotActiveError("Cannot resume a session that is not active")
        if session.remaining_seconds is None or session.remaining_seconds <= 0:
            raise NothingToResumeError("Cannot resume a session with no remaining time")

        remaining = session.remaining_seconds
        updated = self._update_active(
            session_id,
            "resume",
            expires_at=self.now() + timedelta(seconds=remaining),
            armed=True,
            remaining_seconds=None,
        )
        logger.info("Resumed session %s with %.1fs remaining", session_id, remaining)
        return updated

    def stop(self, session_id: str) -> AttendanceSession:
        """End a session for good. Stopping an ended session changes nothing.

        Raises:
            SessionNotFoundError: If the session doesn't exist.
        """
        session = self.store.get_session(session_id)
        if session.status == SessionStatus.ENDED.value:
            logger.debug("Session %s already ended", session_id)
            return session

        try:
            updated = self.store.update_session(
                session_id,
                require_status=SessionStatus.ACTIVE.value,
                status=SessionStatus.ENDED.value,
                ended_at=self.now(),
                armed=False,
            )
        except SessionStatusMismatchError:
            logger.debug("Session %s was ended concurrently", session_id)
            return self.store.get_session(session_id)
        logger.info("Stopped session %s", session_id)
        return updated

    # --- Marking ---

    def mark(self, access_code: str, student_id: int, course_code: str) -> AttendanceMark:
        """Record a student as present in the session carrying access_code.

        Raises:
            InvalidCodeError: If no session carries the code.
            CourseMismatchError: If the session belongs to another course.
            SessionNotActiveError: If the session has ended.
            SessionPausedError: If the session is paused.
            SessionExpiredError: If the window has closed or was never set.
            AlreadyMarkedError: If the student is already marked.
            SessionNotYetStartedError: If the window has not opened yet.
        """
        session = self.find_session_by_code(access_code)
        if course_code != session.course_code:
            raise CourseMismatchError(
                f"Access code does not belong to a session of course {course_code}"
            )

        now = self.now()
        if session.status != SessionStatus.ACTIVE.value:
            raise SessionNotActiveError("Attendance session is not active")
        if not session.armed:
            raise SessionPausedError("Attendance session is currently paused")
        if session.expires_at is None or now >= session.expires_at:
            raise SessionExpiredError("Attendance session expired")
        if self.store.has_mark(student_id, session.id):
            raise AlreadyMarkedError("You have already marked attendance for this session")
        if now < session.scheduled_at:
            raise SessionNotYetStartedError("Attendance session has not started yet")

        try:
            mark = self.store.create_mark(
                student_id=student_id,
                course_code=course_code,
                session_id=session.id,
                access_code=access_code,
                marked_at=now,
            )
        except MarkExistsError as e:
            raise AlreadyMarkedError("You have already marked attendance for this session") from e

        logger.info("Marked student %s present in session %s", student_id, session.id)
        return mark

    # --- Queries ---

    def get_session(self, session_id: str) -> AttendanceSession:
        """Get a session by ID.

        Raises:
            SessionNotFoundError: If the session doesn't exist.
        """
        return self.store.get_session(session_id)

    def find_session_by_code(self, access_code: str) -> AttendanceSession:
        """Most recently created session carrying access_code.

        Raises:
            InvalidCodeError: If no session carries the code.
        """
        session = self.store.find_latest_by_access_code(access_code)
        if session is None:
            logger.info("No session for access code %s", mask_access_code(access_code))
            raise InvalidCodeError("Invalid access code")
        return session

    def phase(self, session: AttendanceSession) -> SessionPhase:
        return derive_phase(session, self.now())

    def is_active(self, session_id: str) -> bool:
        """Whether students can mark right now. Unknown sessions are inactive."""
        try:
            session = self.store.get_session(session_id)
        except SessionNotFoundError:
            return False
        return window_is_open(session, self.now())

    def remaining_time(self, session_id: str) -> float:
        """Seconds left in the armed window; 0 when paused, ended or unknown."""
        try:
            session = self.store.get_session(session_id)
        except SessionNotFoundError:
            return 0.0
        return seconds_remaining(session, self.now())

    def get_attendees(self, session_id: str) -> list[AttendanceMark]:
        """All marks stored for a session, without window filtering."""
        self.store.get_session(session_id)
        return self.store.list_marks(session_id)

    def get_attendees_with_details(self, session_id: str) -> list[AttendeeDetail]:
        """Marks that are valid for the session, with student details.

        A mark counts only if its timestamp lies within the session window
        and its code equals the session's current access code.

        Raises:
            SessionNotFoundError: If the session doesn't exist.
        """
        session = self.store.get_session(session_id)
        return [
            self._attendee_detail(mark, session)
            for mark in self._valid_marks(session)
        ]

    def get_session_statistics(self, session_id: str) -> SessionStatistics:
        """Bundle of window, attendance and liveness figures for a session.

        Raises:
            SessionNotFoundError: If the session doesn't exist.
        """
        session = self.store.get_session(session_id)
        now = self.now()
        return SessionStatistics(
            session_id=session.id,
            course_code=session.course_code,
            session_start=session.scheduled_at,
            session_end=session.expires_at,
            access_code=session.access_code,
            total_attendees=len(self._valid_marks(session)),
            is_active=window_is_open(session, now),
            remaining_seconds=seconds_remaining(session, now),
            phase=derive_phase(session, now),
        )

    def get_active_session(self, course_code: str) -> AttendanceSession | None:
        """The course's most recent session, if students can mark in it now."""
        session = self.store.find_latest_for_course(course_code)
        if session is not None and window_is_open(session, self.now()):
            return session
        return None

    def get_active_session_for_student(self, student_id: int) -> AttendanceSession | None:
        """First active session across the courses a student is enrolled in."""
        if self.directory is None:
            raise RuntimeError("Directory not configured; cannot resolve enrollments")

        course_codes = self.directory.enrolled_course_codes(student_id)
        logger.debug("Student %s enrolled in %s", student_id, course_codes)
        for course_code in course_codes:
            session = self.get_active_session(course_code)
            if session is not None:
                return session
        return None

    def list_sessions_for_course(self, course_code: str) -> list[AttendanceSession]:
        return self.store.list_sessions(course_code=course_code)

    # --- Helpers ---

    def _update_active(
        self, session_id: str, action: str, **changes: object
    ) -> AttendanceSession:
        """Write changes only while the session is still active."""
        try:
            return self.store.update_session(
                session_id, require_status=SessionStatus.ACTIVE.value, **changes
            )
        except SessionStatusMismatchError as e:
            raise SessionNotActiveError(f"Cannot {action} a session that has ended") from e

    def _new_access_code(self) -> str:
        """Generate an access code no existing session carries."""
        for _ in range(MAX_CODE_ATTEMPTS):
            code = secrets.token_urlsafe(self.settings.access_code_bytes)
            if self.store.find_latest_by_access_code(code) is None:
                return code
        raise RuntimeError("Could not generate a unique access code")

    def _valid_marks(self, session: AttendanceSession) -> list[AttendanceMark]:
        if session.expires_at is None:
            return []
        return [
            mark
            for mark in self.store.list_marks(session.id)
            if session.scheduled_at <= mark.marked_at <= session.expires_at
            and mark.access_code == session.access_code
        ]

    def _attendee_detail(self, mark: AttendanceMark, session: AttendanceSession) -> AttendeeDetail:
        student_name = UNKNOWN_STUDENT_NAME
        roll_number = UNKNOWN_ROLL_NUMBER
        if self.directory is not None:
            try:
                user = self.directory.get_user(mark.student_id)
            except DirectoryError:
                logger.debug("No directory entry for student %s", mark.student_id)
            else:
                student_name = user.display_name
                roll_number = user.username

        return AttendeeDetail(
            mark_id=mark.id,
            student_id=mark.student_id,
            student_name=student_name,
            roll_number=roll_number,
            access_code=mark.access_code,
            marked_at=mark.marked_at,
            status=mark.status,
            session_start=session.scheduled_at,
            session_end=session.expires_at,
        )
