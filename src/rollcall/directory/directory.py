"""Directory - lookup of users, courses and enrollments."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from rollcall.directory.exceptions import (
    CourseExistsError,
    CourseNotFoundError,
    EnrollmentExistsError,
    UserExistsError,
    UserNotFoundError,
)
from rollcall.directory.models import Course, Enrollment, Role, User
from rollcall.session_store.database import Database


class Directory:
    """Read-mostly access to the people and courses attendance refers to.

    The session manager only needs lookups (does a course exist, which
    courses is a student enrolled in, what is a student's display name).
    The create methods exist for seeding.
    """

    def __init__(self, database: Database) -> None:
        """Initialize the directory on a shared database.

        Args:
            database: Database shared with the session store.
        """
        self._db = database
        self._db.create_tables()

    # --- Users ---

    def create_user(
        self,
        username: str,
        first_name: str,
        last_name: str,
        role: Role = Role.STUDENT,
        user_id: int | None = None,
    ) -> User:
        """Create a user.

        Raises:
            UserExistsError: If the username (or explicit ID) is taken
        """
        session = self._db.get_session()
        try:
            user = User(
                id=user_id,
                username=username,
                first_name=first_name,
                last_name=last_name,
                role=role.value,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
        except IntegrityError as e:
            session.rollback()
            raise UserExistsError(f"User '{username}' already exists") from e
        finally:
            session.close()

    def get_user(self, user_id: int) -> User:
        """Get a user by ID.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        session = self._db.get_session()
        try:
            user = session.get(User, user_id)
            if user is None:
                raise UserNotFoundError(f"User with id '{user_id}' not found")
            return user
        finally:
            session.close()

    # --- Courses ---

    def create_course(self, code: str, title: str, credit: int = 3) -> Course:
        """Create a course.

        Raises:
            CourseExistsError: If a course with the same code exists
        """
        session = self._db.get_session()
        try:
            course = Course(code=code, title=title, credit=credit)
            session.add(course)
            session.commit()
            session.refresh(course)
            return course
        except IntegrityError as e:
            session.rollback()
            raise CourseExistsError(f"Course '{code}' already exists") from e
        finally:
            session.close()

    def get_course(self, code: str) -> Course:
        """Resolve a course from its code.

        Raises:
            CourseNotFoundError: If no course has this code
        """
        session = self._db.get_session()
        try:
            stmt = select(Course).where(Course.code == code)
            course = session.execute(stmt).scalar_one_or_none()
            if course is None:
                raise CourseNotFoundError(f"Course with code '{code}' not found")
            return course
        finally:
            session.close()

    # --- Enrollments ---

    def enroll(self, student_id: int, course_code: str) -> Enrollment:
        """Enroll a student in a course.

        Raises:
            UserNotFoundError: If the student doesn't exist
            CourseNotFoundError: If the course doesn't exist
            EnrollmentExistsError: If the student is already enrolled
        """
        self.get_user(student_id)
        self.get_course(course_code)

        session = self._db.get_session()
        try:
            enrollment = Enrollment(student_id=student_id, course_code=course_code)
            session.add(enrollment)
            session.commit()
            session.refresh(enrollment)
            return enrollment
        except IntegrityError as e:
            session.rollback()
            raise EnrollmentExistsError(
                f"Student '{student_id}' is already enrolled in '{course_code}'"
            ) from e
        finally:
            session.close()

    def enrolled_course_codes(self, student_id: int) -> list[str]:
        """Course codes a student is enrolled in, in enrollment order."""
        session = self._db.get_session()
        try:
            stmt = (
                select(Enrollment.course_code)
                .where(Enrollment.student_id == student_id)
                .order_by(Enrollment.id)
            )
            return list(session.execute(stmt).scalars().all())
        finally:
            session.close()
