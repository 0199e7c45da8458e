"""Data models and pure time-window derivations for the Session Manager."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from rollcall.session_store import SessionStatus

if TYPE_CHECKING:
    from rollcall.session_store import AttendanceSession


class SessionPhase(StrEnum):
    """Observable state of a session, derived from its stored fields.

    EXPIRED and ENDED are distinct: an expired session still has status
    ``active`` because nothing flips it when its window lapses.
    """

    ARMED = "armed"
    PAUSED = "paused"
    EXPIRED = "expired"
    ENDED = "ended"


def window_is_open(session: AttendanceSession, now: datetime) -> bool:
    """True iff the session is active, armed and now precedes its expiry."""
    return (
        session.status == SessionStatus.ACTIVE.value
        and session.armed
        and session.expires_at is not None
        and now < session.expires_at
    )


def seconds_remaining(session: AttendanceSession, now: datetime) -> float:
    """Seconds left in the armed window, or 0 when there is no armed window."""
    if (
        session.status != SessionStatus.ACTIVE.value
        or not session.armed
        or session.expires_at is None
    ):
        return 0.0
    return max(0.0, (session.expires_at - now).total_seconds())


def derive_phase(session: AttendanceSession, now: datetime) -> SessionPhase:
    """Compute the phase of a session at a given instant."""
    if session.status == SessionStatus.ENDED.value:
        return SessionPhase.ENDED
    if not session.armed:
        return SessionPhase.PAUSED
    if window_is_open(session, now):
        return SessionPhase.ARMED
    return SessionPhase.EXPIRED


@dataclass
class AttendeeDetail:
    """A valid mark enriched with the student's directory details.

    Attributes:
        mark_id: The mark's unique ID.
        student_id: The student's ID.
        student_name: Display name, or "Unknown Student".
        roll_number: The student's username, or "N/A".
        access_code: Code presented when marking.
        marked_at: When the mark was recorded.
        status: Mark status (currently always "present").
        session_start: Start of the session window.
        session_end: End of the session window.
    """

    mark_id: str
    student_id: int
    student_name: str
    roll_number: str
    access_code: str
    marked_at: datetime
    status: str
    session_start: datetime
    session_end: datetime | None


@dataclass
class SessionStatistics:
    """Summary of a session for dashboards.

    Attributes:
        session_id: The session's unique ID.
        course_code: Course the session belongs to.
        session_start: Start of the session window.
        session_end: Current expiry of the session window.
        access_code: The session's access code.
        total_attendees: Number of valid marks.
        is_active: Whether students can mark right now.
        remaining_seconds: Seconds left in the armed window.
        phase: Derived phase of the session.
    """

    session_id: str
    course_code: str
    session_start: datetime
    session_end: datetime | None
    access_code: str
    total_attendees: int
    is_active: bool
    remaining_seconds: float
    phase: SessionPhase
