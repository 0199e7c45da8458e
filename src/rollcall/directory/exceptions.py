"""Custom exceptions for the Directory."""


class DirectoryError(Exception):
    """Base exception for Directory errors."""


class UserNotFoundError(DirectoryError):
    """User with given ID does not exist."""


class UserExistsError(DirectoryError):
    """User with given username already exists."""


class CourseNotFoundError(DirectoryError):
    """Course with given code does not exist."""


class CourseExistsError(DirectoryError):
    """Course with given code already exists."""


class EnrollmentExistsError(DirectoryError):
    """Student is already enrolled in the course."""
