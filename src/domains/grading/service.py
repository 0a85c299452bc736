# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade service for raw marks and their derived values.

This module provides the GradeService class for:
- Entering and editing raw assessment marks
- Reading grades with their total, GPA and letter grade
- Calculating a student's cumulative GPA

Derived values are recomputed on every read and never stored.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from src.core.config import GradingSettings, get_settings
from src.domains.errors import AcademicError, NotFoundError
from src.domains.grading.repository import GradeRepository
from src.domains.grading.scoring import (
    calculate_gpa,
    calculate_student_cgpa,
    calculate_total,
    letter_grade,
)
from src.models.grade import GradeDetail, GradeMarks, GradeRecord

logger = logging.getLogger(__name__)


class GradeService:
    """Service for grades.

    Attributes:
        repository: Store for grade records.
        settings: Grading settings.
    """

    def __init__(
        self,
        repository: GradeRepository,
        settings: GradingSettings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or get_settings().grading

    async def set_grade(
        self,
        student_id: str,
        course_code: str,
        marks: GradeMarks,
    ) -> GradeDetail:
        """Create or replace the raw marks for a pair.

        Returns:
            The saved grade with derived values.
        """
        grade = await self.repository.save_grade(student_id, course_code, marks)

        logger.info("Saved grade: student=%s, course=%s", student_id, course_code)

        return self.to_detail(grade)

    async def update_grade_marks(
        self,
        student_id: str,
        course_code: str,
        updates: dict[str, Any],
    ) -> GradeDetail:
        """Update some components of an existing grade's marks.

        Args:
            student_id: Student identity key.
            course_code: Course code.
            updates: Mark fields to replace, e.g. ``{"final": 42}``.

        Returns:
            The updated grade with derived values.

        Raises:
            NotFoundError: If the pair has no grade.
            AcademicError: If the merged marks are invalid.
        """
        grade = await self._get_grade(student_id, course_code)

        unknown = set(updates) - set(GradeMarks.model_fields)
        if unknown:
            raise AcademicError(
                "Unknown mark fields",
                {"fields": sorted(unknown)},
            )

        try:
            marks = GradeMarks.model_validate({**grade.marks.model_dump(), **updates})
        except ValidationError as e:
            raise AcademicError("Invalid marks", {"errors": e.errors()}) from e

        saved = await self.repository.save_grade(student_id, course_code, marks)

        logger.info(
            "Updated grade marks: student=%s, course=%s, fields=%s",
            student_id,
            course_code,
            ",".join(sorted(updates)),
        )

        return self.to_detail(saved)

    async def get_grade_detail(self, student_id: str, course_code: str) -> GradeDetail:
        """Get a grade with its derived values.

        Raises:
            NotFoundError: If the pair has no grade.
        """
        grade = await self._get_grade(student_id, course_code)
        return self.to_detail(grade)

    async def list_student_grade_details(self, student_id: str) -> list[GradeDetail]:
        """List every grade of a student with derived values."""
        grades = await self.repository.list_grades_for_student(student_id)
        return [self.to_detail(g) for g in grades]

    async def list_course_grade_details(self, course_code: str) -> list[GradeDetail]:
        """List every grade in a course with derived values."""
        grades = await self.repository.list_grades_for_course(course_code)
        return [self.to_detail(g) for g in grades]

    async def get_student_cgpa(self, student_id: str) -> float:
        """Calculate a student's cumulative GPA from the stored marks.

        Returns 0.0 when the student has no grades.
        """
        grades = await self.repository.list_grades_for_student(student_id)
        return calculate_student_cgpa(
            grades,
            decimal_places=self.settings.cgpa_decimal_places,
            default_component_max=self.settings.default_component_max,
        )

    async def delete_grade(self, student_id: str, course_code: str) -> None:
        """Delete the grade for a pair.

        Raises:
            NotFoundError: If the pair has no grade.
        """
        grade = await self._get_grade(student_id, course_code)
        await self.repository.delete_grade(grade.id)

        logger.info("Deleted grade: student=%s, course=%s", student_id, course_code)

    def to_detail(self, grade: GradeRecord) -> GradeDetail:
        """Attach derived values to a stored grade."""
        total = calculate_total(grade.marks, self.settings.default_component_max)
        return GradeDetail(
            student_id=grade.student_id,
            course_code=grade.course_code,
            marks=grade.marks,
            total=total,
            gpa=calculate_gpa(total),
            letter_grade=letter_grade(total),
        )

    async def _get_grade(self, student_id: str, course_code: str) -> GradeRecord:
        grade = await self.repository.get_grade(student_id, course_code)
        if grade is None:
            raise NotFoundError("grade", f"{student_id}/{course_code}")
        return grade
