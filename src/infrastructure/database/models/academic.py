# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for students, courses, enrollments and grades."""

from typing import Any

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin


class Student(Base, TimestampMixin):
    """Student with a running credit-hour balance."""

    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    department_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    semester: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_credit_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_credit_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=18)

    __table_args__ = (
        CheckConstraint("semester > 0", name="ck_students_semester_positive"),
        CheckConstraint("current_credit_hours >= 0", name="ck_students_credit_hours_non_negative"),
        CheckConstraint("max_credit_hours > 0", name="ck_students_max_credit_hours_positive"),
    )

    def __repr__(self) -> str:
        return f"<Student(student_id={self.student_id}, semester={self.semester})>"


class Course(Base, TimestampMixin):
    """Course and its credit-hour cost."""

    __tablename__ = "courses"

    code: Mapped[str] = mapped_column(String(20), primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    credit_hours: Mapped[int] = mapped_column(Integer, nullable=False)
    department_code: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    semester: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint("credit_hours > 0", name="ck_courses_credit_hours_positive"),
    )

    def __repr__(self) -> str:
        return f"<Course(code={self.code}, credit_hours={self.credit_hours})>"


class Enrollment(Base, UUIDMixin, TimestampMixin):
    """Physical enrollment record.

    (student_id, course_code) is not unique. Duplicate records are
    collapsed by the reconciliation sweep.
    """

    __tablename__ = "enrollments"

    student_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("students.student_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_code: Mapped[str] = mapped_column(
        String(20),
        ForeignKey("courses.code", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    __table_args__ = (
        Index("ix_enrollments_student_course", "student_id", "course_code"),
        Index("ix_enrollments_status", "status"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'completed', 'dropped', 'withdrawn')",
            name="ck_enrollments_status",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Enrollment(id={self.id}, student={self.student_id}, "
            f"course={self.course_code}, status={self.status})>"
        )


class Grade(Base, UUIDMixin, TimestampMixin):
    """Raw assessment marks for a (student, course) pair."""

    __tablename__ = "grades"

    student_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("students.student_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_code: Mapped[str] = mapped_column(
        String(20),
        ForeignKey("courses.code", ondelete="CASCADE"),
        nullable=False,
    )
    marks: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    __table_args__ = (
        UniqueConstraint("student_id", "course_code", name="uq_grades_student_course"),
        Index("ix_grades_course", "course_code"),
    )

    def __repr__(self) -> str:
        return f"<Grade(student={self.student_id}, course={self.course_code})>"
