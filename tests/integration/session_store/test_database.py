"""Integration tests for the file-backed database."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import inspect

from rollcall.directory import Directory
from rollcall.session_store import Database, SessionStore

START = datetime(2025, 9, 1, 9, 0, 0, tzinfo=UTC)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "rollcall.db")


@pytest.mark.integration
class TestDatabase:
    """Tests for Database setup on disk."""

    def test_wal_mode_enabled(self, db_path: str) -> None:
        db = Database(db_path)
        db.create_tables()
        assert db.is_wal_mode() is True
        db.close()

    def test_memory_database_is_not_wal(self) -> None:
        db = Database(":memory:")
        assert db.is_memory is True
        assert db.is_wal_mode() is False
        db.close()

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        db = Database(str(tmp_path / "nested" / "dir" / "rollcall.db"))
        db.create_tables()
        assert (tmp_path / "nested" / "dir" / "rollcall.db").exists()
        db.close()

    def test_all_tables_created(self, db_path: str) -> None:
        store = SessionStore(db_path)
        Directory(store.database)

        tables = set(inspect(store.database.engine).get_table_names())
        assert {
            "attendance_sessions",
            "attendance_marks",
            "users",
            "courses",
            "enrollments",
        } <= tables
        store.close()

    def test_mark_uniqueness_index_exists(self, db_path: str) -> None:
        store = SessionStore(db_path)
        constraints = inspect(store.database.engine).get_unique_constraints("attendance_marks")
        columns = [sorted(c["column_names"]) for c in constraints]
        assert ["session_id", "student_id"] in columns
        store.close()


@pytest.mark.integration
class TestPersistence:
    """Sessions and marks survive reconnecting."""

    def test_session_and_marks_persist(self, db_path: str) -> None:
        store1 = SessionStore(db_path)
        session = store1.create_session(
            course_code="CS101",
            access_code="code-1",
            scheduled_at=START,
            expires_at=START + timedelta(minutes=2),
        )
        store1.create_mark(
            student_id=1,
            course_code="CS101",
            session_id=session.id,
            access_code="code-1",
            marked_at=START + timedelta(seconds=5),
        )
        store1.update_session(session.id, armed=False, remaining_seconds=80.5)
        store1.close()

        store2 = SessionStore(db_path)
        loaded = store2.get_session(session.id)
        assert loaded.armed is False
        assert loaded.remaining_seconds == 80.5
        assert loaded.expires_at == START + timedelta(minutes=2)
        assert store2.count_marks(session.id) == 1
        store2.close()

    def test_two_stores_share_state(self, db_path: str) -> None:
        """Separate store instances over one file see each other's writes."""
        writer = SessionStore(db_path)
        reader = SessionStore(db_path)

        session = writer.create_session(
            course_code="CS101", access_code="shared", scheduled_at=START, expires_at=None
        )
        found = reader.find_latest_by_access_code("shared")
        assert found is not None
        assert found.id == session.id

        writer.close()
        reader.close()
