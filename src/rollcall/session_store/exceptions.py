"""Custom exceptions for Session Store."""


class SessionStoreError(Exception):
    """Base exception for Session Store errors."""


class SessionNotFoundError(SessionStoreError):
    """Attendance session with given ID does not exist."""


class MarkExistsError(SessionStoreError):
    """A mark for this student and session already exists."""


class SessionStatusMismatchError(SessionStoreError):
    """A guarded update found the session in a different status."""
