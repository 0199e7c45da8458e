"""REST API for Rollcall."""

from rollcall.api.app import app, create_app, register_exception_handlers
from rollcall.api.models import (
    APIResponse,
    MarkRequest,
    SessionGenerate,
    SessionResponse,
    SessionStart,
)

__all__ = [
    "APIResponse",
    "MarkRequest",
    "SessionGenerate",
    "SessionResponse",
    "SessionStart",
    "app",
    "create_app",
    "register_exception_handlers",
]
