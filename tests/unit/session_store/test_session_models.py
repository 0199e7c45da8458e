"""Unit tests for Session Store models."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from rollcall.session_store import (
    AttendanceMark,
    AttendanceSession,
    MarkStatus,
    SessionStatus,
)
from rollcall.session_store.models import UTCDateTime

START = datetime(2025, 9, 1, 9, 0, 0, tzinfo=UTC)


@pytest.mark.unit
class TestEnums:
    """Tests for status enums."""

    def test_session_status_values(self) -> None:
        assert SessionStatus.ACTIVE.value == "active"
        assert SessionStatus.ENDED.value == "ended"
        assert len(SessionStatus) == 2

    def test_mark_status_values(self) -> None:
        assert MarkStatus.PRESENT == "present"


@pytest.mark.unit
class TestAttendanceSessionModel:
    """Tests for AttendanceSession model defaults."""

    def test_defaults(self) -> None:
        """A new session is active, armed and has no committed duration."""
        session = AttendanceSession(course_code="CS101", access_code="abc123", scheduled_at=START)

        assert session.id is not None
        assert len(session.id) == 36
        assert session.status == SessionStatus.ACTIVE.value
        assert session.session_status == SessionStatus.ACTIVE
        assert session.armed is True
        assert session.duration_seconds is None
        assert session.expires_at is None
        assert session.remaining_seconds is None
        assert session.ended_at is None
        assert session.created_at is not None

    def test_ids_are_unique(self) -> None:
        s1 = AttendanceSession(course_code="CS101", access_code="a", scheduled_at=START)
        s2 = AttendanceSession(course_code="CS101", access_code="b", scheduled_at=START)
        assert s1.id != s2.id

    def test_has_reference_point(self) -> None:
        session = AttendanceSession(course_code="CS101", access_code="a", scheduled_at=START)
        assert session.has_reference_point is False

        session.latitude = 31.5
        assert session.has_reference_point is False

        session.longitude = 74.3
        assert session.has_reference_point is True

    def test_repr(self) -> None:
        session = AttendanceSession(
            course_code="CS101", access_code="a", scheduled_at=START, id="sess-1"
        )
        assert "sess-1" in repr(session)
        assert "CS101" in repr(session)


@pytest.mark.unit
class TestAttendanceMarkModel:
    """Tests for AttendanceMark model defaults."""

    def test_defaults_to_present(self) -> None:
        mark = AttendanceMark(
            student_id=1,
            course_code="CS101",
            session_id="sess-1",
            access_code="abc123",
            marked_at=START,
        )
        assert mark.status == MarkStatus.PRESENT.value
        assert len(mark.id) == 36


@pytest.mark.unit
class TestUTCDateTime:
    """Tests for the UTC-normalising column type."""

    def test_bind_converts_to_naive_utc(self) -> None:
        column_type = UTCDateTime()
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2025, 9, 1, 11, 0, 0, tzinfo=plus_two)

        stored = column_type.process_bind_param(value, None)

        assert stored == datetime(2025, 9, 1, 9, 0, 0)
        assert stored.tzinfo is None

    def test_result_is_aware_utc(self) -> None:
        column_type = UTCDateTime()
        loaded = column_type.process_result_value(datetime(2025, 9, 1, 9, 0, 0), None)
        assert loaded == START
        assert loaded.tzinfo is UTC

    def test_none_passes_through(self) -> None:
        column_type = UTCDateTime()
        assert column_type.process_bind_param(None, None) is None
        assert column_type.process_result_value(None, None) is None
