"""Session Store - Persistent storage for attendance sessions and marks."""

from rollcall.session_store.database import Database
from rollcall.session_store.exceptions import (
    MarkExistsError,
    SessionNotFoundError,
    SessionStatusMismatchError,
    SessionStoreError,
)
from rollcall.session_store.models import (
    AttendanceMark,
    AttendanceSession,
    MarkStatus,
    SessionStatus,
)
from rollcall.session_store.store import SessionStore

__all__ = [
    "AttendanceMark",
    "AttendanceSession",
    "Database",
    "MarkExistsError",
    "MarkStatus",
    "SessionNotFoundError",
    "SessionStatus",
    "SessionStatusMismatchError",
    "SessionStore",
    "SessionStoreError",
]
