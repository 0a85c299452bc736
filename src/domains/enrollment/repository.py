# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Repository contract consumed by the enrollment lifecycle.

Any store can back the lifecycle as long as it offers these calls. Every
method raises PersistenceFailureError when the store itself fails.
"""

from typing import Protocol

from src.models.academic import CourseRecord, StudentRecord
from src.models.enrollment import EnrollmentRecord, EnrollmentStatus


class EnrollmentRepository(Protocol):
    """Persistence of students, courses and enrollment records."""

    async def get_student(self, student_id: str) -> StudentRecord | None:
        """Get a student by identity key."""
        ...

    async def get_course(self, course_code: str) -> CourseRecord | None:
        """Get a course by code."""
        ...

    async def find_enrollments(
        self,
        student_id: str,
        course_code: str,
    ) -> list[EnrollmentRecord]:
        """Get every physical record for a (student, course) pair.

        Records come back in creation order.
        """
        ...

    async def list_enrollments(
        self,
        *,
        student_id: str | None = None,
        course_code: str | None = None,
        status: EnrollmentStatus | None = None,
    ) -> list[EnrollmentRecord]:
        """List enrollment records matching all given filters."""
        ...

    async def list_all_enrollments(self) -> list[EnrollmentRecord]:
        """List every enrollment record in creation order."""
        ...

    async def create_enrollment(
        self,
        student_id: str,
        course_code: str,
        status: EnrollmentStatus,
    ) -> EnrollmentRecord:
        """Create a new enrollment record."""
        ...

    async def update_enrollment_status(
        self,
        enrollment_id: str,
        status: EnrollmentStatus,
    ) -> EnrollmentRecord:
        """Write a new status onto one record."""
        ...

    async def delete_enrollment(self, enrollment_id: str) -> None:
        """Delete one physical record."""
        ...

    async def update_student_credit_hours(self, student_id: str, value: int) -> None:
        """Overwrite a student's current credit-hour balance."""
        ...

    async def update_student_semester(self, student_id: str, semester: int) -> None:
        """Overwrite a student's semester."""
        ...
