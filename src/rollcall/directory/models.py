"""SQLAlchemy models for the Directory (users, courses, enrollments)."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rollcall.session_store.models import Base


class Role(StrEnum):
    """Role of a directory user."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class User(Base):
    """A student, teacher or admin."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    def __init__(
        self,
        username: str,
        first_name: str,
        last_name: str,
        role: str | None = None,
        id: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if id is not None:
            self.id = id
        self.username = username
        self.first_name = first_name
        self.last_name = last_name
        self.role = role if role is not None else Role.STUDENT.value

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, username={self.username!r}, role={self.role!r})>"


class Course(Base):
    """A course that attendance sessions can be opened for."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    credit: Mapped[int] = mapped_column(Integer, nullable=False)

    def __init__(self, code: str, title: str, credit: int = 3, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.code = code
        self.title = title
        self.credit = credit

    def __repr__(self) -> str:
        return f"<Course(code={self.code!r}, title={self.title!r})>"


class Enrollment(Base):
    """A student's enrollment in a course."""

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_code", name="uq_enrollments_student_course"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    course_code: Mapped[str] = mapped_column(
        String(50), ForeignKey("courses.code"), nullable=False
    )

    def __init__(self, student_id: int, course_code: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_code = course_code

    def __repr__(self) -> str:
        return f"<Enrollment(student_id={self.student_id!r}, course_code={self.course_code!r})>"
