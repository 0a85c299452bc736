# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Repository contract consumed by the grade service.

Only raw marks are stored. Every method raises PersistenceFailureError
when the store itself fails.
"""

from typing import Protocol

from src.models.grade import GradeMarks, GradeRecord


class GradeRepository(Protocol):
    """Persistence of grade records keyed by (student_id, course_code)."""

    async def get_grade(self, student_id: str, course_code: str) -> GradeRecord | None:
        """Get the grade for a pair."""
        ...

    async def list_grades_for_student(self, student_id: str) -> list[GradeRecord]:
        """List every grade of a student."""
        ...

    async def list_grades_for_course(self, course_code: str) -> list[GradeRecord]:
        """List every grade in a course."""
        ...

    async def save_grade(
        self,
        student_id: str,
        course_code: str,
        marks: GradeMarks,
    ) -> GradeRecord:
        """Create the grade for a pair, or replace its marks if it exists."""
        ...

    async def delete_grade(self, grade_id: str) -> None:
        """Delete one grade record."""
        ...
