"""Shared pytest fixtures and configuration."""

from datetime import UTC, datetime, timedelta

import pytest

from rollcall.config import Settings
from rollcall.directory import Directory
from rollcall.session_manager import SessionManager
from rollcall.session_store import SessionStore


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class FakeClock:
    """Controllable stand-in for datetime.now(UTC)."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 9, 1, 9, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    """A clock frozen at a fixed instant until advanced."""
    return FakeClock()


@pytest.fixture
def store():
    """Create an in-memory SessionStore."""
    s = SessionStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def directory(store: SessionStore) -> Directory:
    """Directory sharing the store's database, seeded with CS101 and two students."""
    d = Directory(store.database)
    d.create_course(code="CS101", title="Intro to Programming")
    d.create_course(code="MA201", title="Linear Algebra")
    d.create_user(username="s1001", first_name="Ada", last_name="Lovelace", user_id=1)
    d.create_user(username="s1002", first_name="Alan", last_name="Turing", user_id=2)
    return d


@pytest.fixture
def settings() -> Settings:
    return Settings(db_path=":memory:")


@pytest.fixture
def manager(
    store: SessionStore, directory: Directory, settings: Settings, clock: FakeClock
) -> SessionManager:
    """SessionManager over the in-memory store, driven by the fake clock."""
    return SessionManager(store, directory=directory, settings=settings, clock=clock)
