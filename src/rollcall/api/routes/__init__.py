"""API route modules."""

from rollcall.api.routes import attendance, courses, directory, sessions

__all__ = ["attendance", "courses", "directory", "sessions"]
