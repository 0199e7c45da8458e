"""Directory - users, courses and enrollments that attendance refers to."""

from rollcall.directory.directory import Directory
from rollcall.directory.exceptions import (
    CourseExistsError,
    CourseNotFoundError,
    DirectoryError,
    EnrollmentExistsError,
    UserExistsError,
    UserNotFoundError,
)
from rollcall.directory.models import Course, Enrollment, Role, User

__all__ = [
    "Course",
    "CourseExistsError",
    "CourseNotFoundError",
    "Directory",
    "DirectoryError",
    "Enrollment",
    "EnrollmentExistsError",
    "Role",
    "User",
    "UserExistsError",
    "UserNotFoundError",
]
