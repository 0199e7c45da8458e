"""End-to-end classroom scenarios against SessionManager."""

import pytest

from rollcall.session_manager import (
    AlreadyMarkedError,
    SessionExpiredError,
    SessionManager,
    SessionNotActiveError,
    SessionPhase,
)


@pytest.mark.unit
class TestClassroomScenarios:
    """Scenarios a teacher and students walk through in one lecture."""

    def test_cs101_mark_once(self, manager: SessionManager, clock) -> None:
        """generate -> start -> mark succeeds -> second mark is rejected."""
        session = manager.generate("CS101", "Grace Hopper", "ghopper")
        manager.start(session.id, 120)
        clock.advance(5)

        mark = manager.mark(session.access_code, 1, "CS101")
        assert mark.status == "present"

        with pytest.raises(AlreadyMarkedError):
            manager.mark(session.access_code, 1, "CS101")

    def test_pause_before_start(self, manager: SessionManager) -> None:
        session = manager.generate("CS101", "Grace Hopper", "ghopper")
        with pytest.raises(SessionNotActiveError):
            manager.pause(session.id)

    def test_stop_ends_marking_with_time_left(self, manager: SessionManager, clock) -> None:
        session = manager.generate("CS101", "Grace Hopper", "ghopper")
        manager.start(session.id, 120)
        clock.advance(10)
        manager.stop(session.id)

        with pytest.raises(SessionNotActiveError):
            manager.mark(session.access_code, 1, "CS101")

    def test_lecture_with_break(self, manager: SessionManager, clock) -> None:
        """Two students mark, the teacher pauses, resumes, and a third is too late."""
        session = manager.generate("CS101", "Grace Hopper", "ghopper")
        manager.start(session.id, 120)

        clock.advance(10)
        manager.mark(session.access_code, 1, "CS101")
        clock.advance(30)
        manager.pause(session.id)

        clock.advance(600)
        manager.resume(session.id)
        clock.advance(20)
        manager.mark(session.access_code, 2, "CS101")

        clock.advance(61)
        assert manager.phase(manager.get_session(session.id)) == SessionPhase.EXPIRED
        with pytest.raises(SessionExpiredError):
            manager.mark(session.access_code, 3, "CS101")

        manager.stop(session.id)
        stats = manager.get_session_statistics(session.id)
        assert stats.phase == SessionPhase.ENDED
        assert [a.student_id for a in manager.get_attendees(session.id)] == [1, 2]
