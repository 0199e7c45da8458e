"""Directory seeding endpoints (users, courses, enrollments)."""

from fastapi import APIRouter, status

from rollcall.api.dependencies import DirectoryDep
from rollcall.api.models import (
    APIResponse,
    CourseCreate,
    CourseResponse,
    EnrollmentCreate,
    EnrollmentResponse,
    UserCreate,
    UserResponse,
)
from rollcall.directory import Role

router = APIRouter(prefix="/directory", tags=["directory"])


@router.post(
    "/users",
    response_model=APIResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_user(user: UserCreate, directory: DirectoryDep) -> APIResponse[UserResponse]:
    """Register a student, teacher or admin."""
    created = directory.create_user(
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        role=Role(user.role),
        user_id=user.id,
    )
    return APIResponse(data=UserResponse.model_validate(created))


@router.post(
    "/courses",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(course: CourseCreate, directory: DirectoryDep) -> APIResponse[CourseResponse]:
    """Register a course."""
    created = directory.create_course(code=course.code, title=course.title, credit=course.credit)
    return APIResponse(data=CourseResponse.model_validate(created))


@router.post(
    "/enrollments",
    response_model=APIResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_enrollment(
    enrollment: EnrollmentCreate, directory: DirectoryDep
) -> APIResponse[EnrollmentResponse]:
    """Enroll a student in a course."""
    created = directory.enroll(enrollment.student_id, enrollment.course_code)
    return APIResponse(data=EnrollmentResponse.model_validate(created))
