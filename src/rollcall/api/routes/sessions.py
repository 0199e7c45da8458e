"""Teacher-facing session lifecycle endpoints."""

from fastapi import APIRouter, status

from rollcall.api.dependencies import SessionManagerDep
from rollcall.api.models import (
    APIResponse,
    AttendeeResponse,
    SessionGenerate,
    SessionResponse,
    SessionStart,
    SessionStatisticsResponse,
    SessionStatusResponse,
    attendee_to_response,
    session_to_response,
    statistics_to_response,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post(
    "",
    response_model=APIResponse[SessionResponse],
    status_code=status.HTTP_201_CREATED,
)
def generate_session(
    request: SessionGenerate, manager: SessionManagerDep
) -> APIResponse[SessionResponse]:
    """Open a new session and issue its access code."""
    session = manager.generate(
        course_code=request.course_code,
        teacher_name=request.teacher_name,
        teacher_username=request.teacher_username,
    )
    return APIResponse(data=session_to_response(session))


@router.get("/{session_id}", response_model=APIResponse[SessionResponse])
def get_session(session_id: str, manager: SessionManagerDep) -> APIResponse[SessionResponse]:
    """Get a session by ID."""
    return APIResponse(data=session_to_response(manager.get_session(session_id)))


@router.post("/{session_id}/start", response_model=APIResponse[SessionResponse])
def start_session(
    session_id: str, request: SessionStart, manager: SessionManagerDep
) -> APIResponse[SessionResponse]:
    """Commit a duration and start the countdown."""
    session = manager.start(
        session_id,
        request.duration_seconds,
        latitude=request.latitude,
        longitude=request.longitude,
        location_label=request.location_label,
    )
    return APIResponse(data=session_to_response(session))


@router.post("/{session_id}/pause", response_model=APIResponse[SessionResponse])
def pause_session(session_id: str, manager: SessionManagerDep) -> APIResponse[SessionResponse]:
    """Pause the countdown."""
    return APIResponse(data=session_to_response(manager.pause(session_id)))


@router.post("/{session_id}/resume", response_model=APIResponse[SessionResponse])
def resume_session(session_id: str, manager: SessionManagerDep) -> APIResponse[SessionResponse]:
    """Resume a paused countdown."""
    return APIResponse(data=session_to_response(manager.resume(session_id)))


@router.post("/{session_id}/stop", response_model=APIResponse[SessionResponse])
def stop_session(session_id: str, manager: SessionManagerDep) -> APIResponse[SessionResponse]:
    """End the session."""
    return APIResponse(data=session_to_response(manager.stop(session_id)))


@router.get("/{session_id}/status", response_model=APIResponse[SessionStatusResponse])
def get_session_status(
    session_id: str, manager: SessionManagerDep
) -> APIResponse[SessionStatusResponse]:
    """Live status of a session."""
    session = manager.get_session(session_id)
    return APIResponse(
        data=SessionStatusResponse(
            session_id=session.id,
            is_active=manager.is_active(session_id),
            remaining_seconds=manager.remaining_time(session_id),
            phase=manager.phase(session).value,
        )
    )


@router.get("/{session_id}/attendees", response_model=APIResponse[list[AttendeeResponse]])
def list_attendees(
    session_id: str, manager: SessionManagerDep
) -> APIResponse[list[AttendeeResponse]]:
    """Valid attendees of a session with student details."""
    details = manager.get_attendees_with_details(session_id)
    return APIResponse(data=[attendee_to_response(d) for d in details])


@router.get(
    "/{session_id}/statistics",
    response_model=APIResponse[SessionStatisticsResponse],
)
def get_session_statistics(
    session_id: str, manager: SessionManagerDep
) -> APIResponse[SessionStatisticsResponse]:
    """Summary figures for a session."""
    stats = manager.get_session_statistics(session_id)
    return APIResponse(data=statistics_to_response(stats))
