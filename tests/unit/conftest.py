# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit test fixtures.

Provides an in-memory store implementing both repository protocols, so
lifecycle behaviour can be checked end to end without a database.
"""

from itertools import count

import pytest

from src.core.config import EnrollmentSettings, GradingSettings
from src.domains.enrollment import EnrollmentReconciler, EnrollmentService, StudentLockRegistry
from src.domains.errors import NotFoundError, PersistenceFailureError
from src.domains.grading import GradeService
from src.models.academic import CourseRecord, StudentRecord
from src.models.enrollment import EnrollmentRecord, EnrollmentStatus
from src.models.grade import GradeMarks, GradeRecord


class InMemoryAcademicRepository:
    """Dict-backed store for students, courses, enrollments and grades.

    Records are kept in insertion order. Set ``fail_credit_hours_writes``
    or ``fail_status_writes`` to make those writes raise
    PersistenceFailureError.
    """

    def __init__(self) -> None:
        self.students: dict[str, StudentRecord] = {}
        self.courses: dict[str, CourseRecord] = {}
        self.enrollments: dict[str, EnrollmentRecord] = {}
        self.grades: dict[str, GradeRecord] = {}
        self.fail_credit_hours_writes = False
        self.fail_status_writes = False
        self.credit_hours_writes: list[tuple[str, int]] = []
        self._ids = count(1)

    # Seeding helpers

    def add_student(
        self,
        student_id: str,
        current_credit_hours: int = 0,
        max_credit_hours: int = 18,
        semester: int = 1,
    ) -> StudentRecord:
        student = StudentRecord(
            student_id=student_id,
            name=f"Student {student_id}",
            department_code="CS",
            semester=semester,
            current_credit_hours=current_credit_hours,
            max_credit_hours=max_credit_hours,
        )
        self.students[student_id] = student
        return student

    def add_course(self, code: str, credit_hours: int = 3) -> CourseRecord:
        course = CourseRecord(
            code=code,
            title=f"Course {code}",
            credit_hours=credit_hours,
            department_code="CS",
            semester=1,
        )
        self.courses[code] = course
        return course

    def add_enrollment(
        self,
        student_id: str,
        course_code: str,
        status: EnrollmentStatus,
    ) -> EnrollmentRecord:
        record = EnrollmentRecord(
            id=f"enr-{next(self._ids)}",
            student_id=student_id,
            course_code=course_code,
            status=status,
        )
        self.enrollments[record.id] = record
        return record

    def records_for(self, student_id: str, course_code: str) -> list[EnrollmentRecord]:
        return [
            r
            for r in self.enrollments.values()
            if r.student_id == student_id and r.course_code == course_code
        ]

    # EnrollmentRepository

    async def get_student(self, student_id: str) -> StudentRecord | None:
        return self.students.get(student_id)

    async def get_course(self, course_code: str) -> CourseRecord | None:
        return self.courses.get(course_code)

    async def find_enrollments(self, student_id: str, course_code: str) -> list[EnrollmentRecord]:
        return self.records_for(student_id, course_code)

    async def list_enrollments(
        self,
        *,
        student_id: str | None = None,
        course_code: str | None = None,
        status: EnrollmentStatus | None = None,
    ) -> list[EnrollmentRecord]:
        return [
            r
            for r in self.enrollments.values()
            if (student_id is None or r.student_id == student_id)
            and (course_code is None or r.course_code == course_code)
            and (status is None or r.status == status)
        ]

    async def list_all_enrollments(self) -> list[EnrollmentRecord]:
        return list(self.enrollments.values())

    async def create_enrollment(
        self,
        student_id: str,
        course_code: str,
        status: EnrollmentStatus,
    ) -> EnrollmentRecord:
        return self.add_enrollment(student_id, course_code, status)

    async def update_enrollment_status(
        self,
        enrollment_id: str,
        status: EnrollmentStatus,
    ) -> EnrollmentRecord:
        if self.fail_status_writes:
            raise PersistenceFailureError("Failed to update enrollment status")
        if enrollment_id not in self.enrollments:
            raise NotFoundError("enrollment", enrollment_id)
        updated = self.enrollments[enrollment_id].model_copy(update={"status": status})
        self.enrollments[enrollment_id] = updated
        return updated

    async def delete_enrollment(self, enrollment_id: str) -> None:
        self.enrollments.pop(enrollment_id, None)

    async def update_student_credit_hours(self, student_id: str, value: int) -> None:
        if self.fail_credit_hours_writes:
            raise PersistenceFailureError("Failed to update student")
        if student_id not in self.students:
            raise NotFoundError("student", student_id)
        self.credit_hours_writes.append((student_id, value))
        self.students[student_id] = self.students[student_id].model_copy(
            update={"current_credit_hours": value}
        )

    async def update_student_semester(self, student_id: str, semester: int) -> None:
        self.students[student_id] = self.students[student_id].model_copy(
            update={"semester": semester}
        )

    # GradeRepository

    async def get_grade(self, student_id: str, course_code: str) -> GradeRecord | None:
        for grade in self.grades.values():
            if grade.student_id == student_id and grade.course_code == course_code:
                return grade
        return None

    async def list_grades_for_student(self, student_id: str) -> list[GradeRecord]:
        return [g for g in self.grades.values() if g.student_id == student_id]

    async def list_grades_for_course(self, course_code: str) -> list[GradeRecord]:
        return [g for g in self.grades.values() if g.course_code == course_code]

    async def save_grade(
        self,
        student_id: str,
        course_code: str,
        marks: GradeMarks,
    ) -> GradeRecord:
        existing = await self.get_grade(student_id, course_code)
        if existing is not None:
            saved = existing.model_copy(update={"marks": marks})
        else:
            saved = GradeRecord(
                id=f"grd-{next(self._ids)}",
                student_id=student_id,
                course_code=course_code,
                marks=marks,
            )
        self.grades[saved.id] = saved
        return saved

    async def delete_grade(self, grade_id: str) -> None:
        self.grades.pop(grade_id, None)


@pytest.fixture
def repository() -> InMemoryAcademicRepository:
    """Provide an empty in-memory store."""
    return InMemoryAcademicRepository()


@pytest.fixture
def locks() -> StudentLockRegistry:
    """Provide a lock registry shared by the services under test."""
    return StudentLockRegistry()


@pytest.fixture
def enrollment_settings() -> EnrollmentSettings:
    """Provide enrollment settings independent of the environment."""
    return EnrollmentSettings(
        max_semester=8,
        reset_credit_hours_on_promotion=True,
    )


@pytest.fixture
def grading_settings() -> GradingSettings:
    """Provide grading settings independent of the environment."""
    return GradingSettings(cgpa_decimal_places=2, default_component_max=100.0)


@pytest.fixture
def enrollment_service(repository, locks, enrollment_settings) -> EnrollmentService:
    """Provide an enrollment service over the in-memory store."""
    return EnrollmentService(repository, locks=locks, settings=enrollment_settings)


@pytest.fixture
def reconciler(repository, locks) -> EnrollmentReconciler:
    """Provide a reconciler over the in-memory store."""
    return EnrollmentReconciler(repository, locks=locks)


@pytest.fixture
def grade_service(repository, grading_settings) -> GradeService:
    """Provide a grade service over the in-memory store."""
    return GradeService(repository, settings=grading_settings)
