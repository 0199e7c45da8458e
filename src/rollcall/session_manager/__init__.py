"""Session Manager package - attendance session state machine."""

from rollcall.session_manager.exceptions import (
    AlreadyMarkedError,
    CourseMismatchError,
    InvalidCodeError,
    InvalidDurationError,
    NothingToResumeError,
    SessionAlreadyExpiredError,
    SessionExpiredError,
    SessionManagerError,
    SessionNotActiveError,
    SessionNotStartedError,
    SessionNotYetStartedError,
    SessionPausedError,
)
from rollcall.session_manager.manager import SessionManager
from rollcall.session_manager.models import (
    AttendeeDetail,
    SessionPhase,
    SessionStatistics,
    derive_phase,
)

__all__ = [
    "AlreadyMarkedError",
    "AttendeeDetail",
    "CourseMismatchError",
    "InvalidCodeError",
    "InvalidDurationError",
    "NothingToResumeError",
    "SessionAlreadyExpiredError",
    "SessionExpiredError",
    "SessionManager",
    "SessionManagerError",
    "SessionNotActiveError",
    "SessionNotStartedError",
    "SessionNotYetStartedError",
    "SessionPausedError",
    "SessionPhase",
    "SessionStatistics",
    "derive_phase",
]
