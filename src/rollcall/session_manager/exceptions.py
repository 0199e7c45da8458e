"""Exceptions for the Session Manager module.

Unknown sessions and courses are reported by the stores themselves
(SessionNotFoundError, CourseNotFoundError) and propagate unchanged.
"""


class SessionManagerError(Exception):
    """Base exception for session manager errors."""

    pass


class InvalidCodeError(SessionManagerError):
    """No session carries the submitted access code."""


class SessionNotActiveError(SessionManagerError):
    """The session has ended, or has no running window to act on."""


class SessionNotStartedError(SessionNotActiveError):
    """The teacher has not committed a duration yet."""


class SessionPausedError(SessionManagerError):
    """The session countdown is paused."""


class SessionExpiredError(SessionManagerError):
    """The marking window has closed."""


class SessionNotYetStartedError(SessionManagerError):
    """The marking window has not opened yet."""


class AlreadyMarkedError(SessionManagerError):
    """The student already has a mark for this session."""


class SessionAlreadyExpiredError(SessionManagerError):
    """The session expired before it could be paused."""


class NothingToResumeError(SessionManagerError):
    """The session has no paused time left to resume."""


class InvalidDurationError(SessionManagerError):
    """The requested duration is not a positive number of seconds."""


class CourseMismatchError(SessionManagerError):
    """The access code belongs to a session of another course."""
