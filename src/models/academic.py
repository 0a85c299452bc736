# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student and course records.

These are the read models handed out by the repository. Administrative
CRUD for students and courses lives elsewhere; the enrollment engine only
reads them and writes a student's credit-hour balance and semester.
"""

from pydantic import BaseModel, ConfigDict, Field


class StudentRecord(BaseModel):
    """Student as seen by the enrollment engine.

    ``current_credit_hours`` is the running total of credit hours held by
    approved enrollments. Only the enrollment lifecycle writes it.
    """

    model_config = ConfigDict(from_attributes=True)

    student_id: str = Field(description="Student identity key")
    name: str = Field(default="", description="Display name")
    department_code: str = Field(description="Owning department code")
    semester: int = Field(gt=0, description="Current semester")
    current_credit_hours: int = Field(ge=0, description="Hours held by approved enrollments")
    max_credit_hours: int = Field(gt=0, description="Per-semester credit-hour capacity")

    @property
    def available_credit_hours(self) -> int:
        """Credit hours left before reaching the capacity."""
        return self.max_credit_hours - self.current_credit_hours


class CourseRecord(BaseModel):
    """Course as seen by the enrollment engine."""

    model_config = ConfigDict(from_attributes=True)

    code: str = Field(description="Course identity key")
    title: str = Field(default="", description="Course title")
    credit_hours: int = Field(gt=0, description="Cost against a student's capacity")
    department_code: str = Field(description="Owning department code")
    semester: int = Field(gt=0, description="Semester the course is offered in")
