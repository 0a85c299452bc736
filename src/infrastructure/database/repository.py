# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQL repository for academic records.

AcademicRepository implements both EnrollmentRepository and
GradeRepository over an AsyncSession. Each write is its own unit of work
and is committed before the method returns. Every SQLAlchemyError rolls
the session back and is re-raised as PersistenceFailureError.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.errors import NotFoundError, PersistenceFailureError
from src.infrastructure.database.models.academic import Course, Enrollment, Grade, Student
from src.models.academic import CourseRecord, StudentRecord
from src.models.enrollment import EnrollmentRecord, EnrollmentStatus
from src.models.grade import GradeMarks, GradeRecord
from src.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class AcademicRepository:
    """Store for students, courses, enrollments and grades.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize repository.

        Args:
            db: Async database session.
        """
        self.db = db

    # =========================================================================
    # Students and courses
    # =========================================================================

    async def get_student(self, student_id: str) -> StudentRecord | None:
        query = select(Student).where(Student.student_id == student_id)
        async with self._guard("load student"):
            result = await self.db.execute(query)
            student = result.scalar_one_or_none()
        return StudentRecord.model_validate(student) if student else None

    async def get_course(self, course_code: str) -> CourseRecord | None:
        query = select(Course).where(Course.code == course_code)
        async with self._guard("load course"):
            result = await self.db.execute(query)
            course = result.scalar_one_or_none()
        return CourseRecord.model_validate(course) if course else None

    async def update_student_credit_hours(self, student_id: str, value: int) -> None:
        """Overwrite a student's credit-hour balance.

        Raises:
            NotFoundError: If the student does not exist.
            PersistenceFailureError: If the write fails.
        """
        await self._update_student(student_id, current_credit_hours=value)

    async def update_student_semester(self, student_id: str, semester: int) -> None:
        """Overwrite a student's semester.

        Raises:
            NotFoundError: If the student does not exist.
            PersistenceFailureError: If the write fails.
        """
        await self._update_student(student_id, semester=semester)

    async def _update_student(self, student_id: str, **values: Any) -> None:
        query = update(Student).where(Student.student_id == student_id).values(**values)
        async with self._guard("update student", commit=True):
            result = await self.db.execute(query)
        if result.rowcount == 0:
            raise NotFoundError("student", student_id)

    # =========================================================================
    # Enrollments
    # =========================================================================

    async def find_enrollments(
        self,
        student_id: str,
        course_code: str,
    ) -> list[EnrollmentRecord]:
        return await self.list_enrollments(student_id=student_id, course_code=course_code)

    async def list_enrollments(
        self,
        *,
        student_id: str | None = None,
        course_code: str | None = None,
        status: EnrollmentStatus | None = None,
    ) -> list[EnrollmentRecord]:
        query = select(Enrollment)
        if student_id is not None:
            query = query.where(Enrollment.student_id == student_id)
        if course_code is not None:
            query = query.where(Enrollment.course_code == course_code)
        if status is not None:
            query = query.where(Enrollment.status == status.value)
        query = query.order_by(Enrollment.created_at, Enrollment.id)

        async with self._guard("list enrollments"):
            result = await self.db.execute(query)
            rows = result.scalars().all()
        return [_to_enrollment(row) for row in rows]

    async def list_all_enrollments(self) -> list[EnrollmentRecord]:
        return await self.list_enrollments()

    async def create_enrollment(
        self,
        student_id: str,
        course_code: str,
        status: EnrollmentStatus,
    ) -> EnrollmentRecord:
        enrollment = Enrollment(
            student_id=student_id,
            course_code=course_code,
            status=status.value,
        )
        async with self._guard("create enrollment", commit=True):
            self.db.add(enrollment)
        await self._refresh(enrollment)
        return _to_enrollment(enrollment)

    async def update_enrollment_status(
        self,
        enrollment_id: str,
        status: EnrollmentStatus,
    ) -> EnrollmentRecord:
        """Write a new status onto one record.

        Raises:
            NotFoundError: If the record does not exist.
            PersistenceFailureError: If the write fails.
        """
        query = select(Enrollment).where(Enrollment.id == enrollment_id)
        async with self._guard("load enrollment"):
            result = await self.db.execute(query)
            enrollment = result.scalar_one_or_none()
        if enrollment is None:
            raise NotFoundError("enrollment", enrollment_id)

        async with self._guard("update enrollment status", commit=True):
            enrollment.status = status.value
        await self._refresh(enrollment)
        return _to_enrollment(enrollment)

    async def delete_enrollment(self, enrollment_id: str) -> None:
        query = delete(Enrollment).where(Enrollment.id == enrollment_id)
        async with self._guard("delete enrollment", commit=True):
            await self.db.execute(query)

    # =========================================================================
    # Grades
    # =========================================================================

    async def get_grade(self, student_id: str, course_code: str) -> GradeRecord | None:
        grade = await self._load_grade(student_id, course_code)
        return _to_grade(grade) if grade else None

    async def list_grades_for_student(self, student_id: str) -> list[GradeRecord]:
        return await self._list_grades(Grade.student_id == student_id)

    async def list_grades_for_course(self, course_code: str) -> list[GradeRecord]:
        return await self._list_grades(Grade.course_code == course_code)

    async def save_grade(
        self,
        student_id: str,
        course_code: str,
        marks: GradeMarks,
    ) -> GradeRecord:
        grade = await self._load_grade(student_id, course_code)

        async with self._guard("save grade", commit=True):
            if grade is None:
                grade = Grade(
                    student_id=student_id,
                    course_code=course_code,
                    marks=marks.model_dump(),
                )
                self.db.add(grade)
            else:
                grade.marks = marks.model_dump()
        await self._refresh(grade)
        return _to_grade(grade)

    async def delete_grade(self, grade_id: str) -> None:
        query = delete(Grade).where(Grade.id == grade_id)
        async with self._guard("delete grade", commit=True):
            await self.db.execute(query)

    async def _load_grade(self, student_id: str, course_code: str) -> Grade | None:
        query = select(Grade).where(
            Grade.student_id == student_id,
            Grade.course_code == course_code,
        )
        async with self._guard("load grade"):
            result = await self.db.execute(query)
            return result.scalar_one_or_none()

    async def _list_grades(self, condition: Any) -> list[GradeRecord]:
        query = select(Grade).where(condition).order_by(Grade.created_at, Grade.id)
        async with self._guard("list grades"):
            result = await self.db.execute(query)
            rows = result.scalars().all()
        return [_to_grade(row) for row in rows]

    # =========================================================================
    # Helpers
    # =========================================================================

    @asynccontextmanager
    async def _guard(self, action: str, commit: bool = False) -> AsyncIterator[None]:
        """Translate store errors, optionally committing on success.

        Raises:
            PersistenceFailureError: If the block or the commit fails.
        """
        try:
            yield
            if commit:
                await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to %s: %s", action, e)
            raise PersistenceFailureError(f"Failed to {action}", e) from e

    async def _refresh(self, instance: Any) -> None:
        async with self._guard("reload record"):
            await self.db.refresh(instance)


def _to_enrollment(row: Enrollment) -> EnrollmentRecord:
    """Convert an enrollment row to its record."""
    return EnrollmentRecord(
        id=str(row.id),
        student_id=row.student_id,
        course_code=row.course_code,
        status=EnrollmentStatus(row.status),
        created_at=ensure_utc(row.created_at) or utc_now(),
    )


def _to_grade(row: Grade) -> GradeRecord:
    """Convert a grade row to its record."""
    return GradeRecord(
        id=str(row.id),
        student_id=row.student_id,
        course_code=row.course_code,
        marks=GradeMarks.model_validate(row.marks or {}),
        created_at=ensure_utc(row.created_at) or utc_now(),
    )
