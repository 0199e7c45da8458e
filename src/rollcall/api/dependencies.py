"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends

from rollcall.config import Settings
from rollcall.directory import Directory
from rollcall.location import LocationVerifier
from rollcall.session_manager import SessionManager
from rollcall.session_store import Database, SessionStore


@dataclass
class Services:
    """Components wired together for one app instance.

    Holds no attendance state of its own; everything lives in the database.
    """

    database: Database
    store: SessionStore
    directory: Directory
    manager: SessionManager
    location_verifier: LocationVerifier

    def close(self) -> None:
        self.database.close()


def build_services(settings: Settings) -> Services:
    """Create the database, stores, directory and manager for given settings."""
    database = Database(settings.db_path)
    store = SessionStore(database=database)
    directory = Directory(database)
    manager = SessionManager(store, directory=directory, settings=settings)
    location_verifier = LocationVerifier(
        radius_m=settings.location_radius_m,
        tolerance_m=settings.location_tolerance_m,
    )
    return Services(
        database=database,
        store=store,
        directory=directory,
        manager=manager,
        location_verifier=location_verifier,
    )


# Global Services instance (initialized on app startup)
_services: Services | None = None


def init_services(settings: Settings) -> Services:
    """Initialize the global Services instance."""
    global _services  # noqa: PLW0603
    _services = build_services(settings)
    return _services


def close_services() -> None:
    """Close the global Services instance."""
    global _services  # noqa: PLW0603
    if _services is not None:
        _services.close()
        _services = None


def _require_services() -> Services:
    if _services is None:
        raise RuntimeError("Services not initialized. Call init_services() first.")
    return _services


def get_session_manager() -> Generator[SessionManager, None, None]:
    """Dependency that provides the SessionManager instance."""
    yield _require_services().manager


def get_directory() -> Generator[Directory, None, None]:
    """Dependency that provides the Directory instance."""
    yield _require_services().directory


def get_location_verifier() -> Generator[LocationVerifier, None, None]:
    """Dependency that provides the LocationVerifier instance."""
    yield _require_services().location_verifier


# Type aliases for dependency injection
SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]
DirectoryDep = Annotated[Directory, Depends(get_directory)]
LocationVerifierDep = Annotated[LocationVerifier, Depends(get_location_verifier)]
