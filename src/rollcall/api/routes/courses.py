"""Course-scoped session queries."""

from fastapi import APIRouter

from rollcall.api.dependencies import SessionManagerDep
from rollcall.api.models import (
    APIResponse,
    SessionResponse,
    StudentSessionResponse,
    session_to_response,
    student_session_to_response,
)

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("/{course_code}/sessions", response_model=APIResponse[list[SessionResponse]])
def list_course_sessions(
    course_code: str, manager: SessionManagerDep
) -> APIResponse[list[SessionResponse]]:
    """All sessions of a course, most recent first."""
    sessions = manager.list_sessions_for_course(course_code)
    return APIResponse(data=[session_to_response(s) for s in sessions])


@router.get(
    "/{course_code}/active-session",
    response_model=APIResponse[StudentSessionResponse],
)
def get_active_course_session(
    course_code: str, manager: SessionManagerDep
) -> APIResponse[StudentSessionResponse]:
    """The course's session students can mark in right now, if any."""
    session = manager.get_active_session(course_code)
    if session is None:
        return APIResponse(data=None)
    return APIResponse(data=student_session_to_response(session))
