"""Student-facing attendance endpoints."""

import logging

from fastapi import APIRouter, status

from rollcall.api.dependencies import LocationVerifierDep, SessionManagerDep
from rollcall.api.models import (
    APIResponse,
    LocationRequest,
    LocationResponse,
    MarkRequest,
    MarkResponse,
    StudentSessionResponse,
    location_to_response,
    mark_to_response,
    student_session_to_response,
)
from rollcall.location import LocationRejectedError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["attendance"])


@router.post(
    "/attendance/mark",
    response_model=APIResponse[MarkResponse],
    status_code=status.HTTP_201_CREATED,
)
def mark_attendance(
    request: MarkRequest,
    manager: SessionManagerDep,
    verifier: LocationVerifierDep,
) -> APIResponse[MarkResponse]:
    """Mark a student present. Coordinates, when sent, are checked first."""
    if request.latitude is not None and request.longitude is not None:
        session = manager.find_session_by_code(request.access_code)
        result = verifier.verify(session, request.latitude, request.longitude)
        if not result.verified:
            logger.info(
                "Location rejected for student %s in session %s (%.1fm)",
                request.student_id,
                session.id,
                result.distance_m,
            )
            raise LocationRejectedError(result)

    mark = manager.mark(request.access_code, request.student_id, request.course_code)
    return APIResponse(data=mark_to_response(mark))


@router.post("/attendance/verify-location", response_model=APIResponse[LocationResponse])
def verify_location(
    request: LocationRequest,
    manager: SessionManagerDep,
    verifier: LocationVerifierDep,
) -> APIResponse[LocationResponse]:
    """Advisory location check against the session carrying the access code."""
    session = manager.find_session_by_code(request.access_code)
    result = verifier.verify(session, request.latitude, request.longitude)
    return APIResponse(data=location_to_response(result))


@router.get(
    "/students/{student_id}/active-session",
    response_model=APIResponse[StudentSessionResponse],
)
def get_active_session_for_student(
    student_id: int, manager: SessionManagerDep
) -> APIResponse[StudentSessionResponse]:
    """First session the student can mark in across their enrolled courses."""
    session = manager.get_active_session_for_student(student_id)
    if session is None:
        return APIResponse(data=None)
    return APIResponse(data=student_session_to_response(session))
